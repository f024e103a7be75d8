from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'rooms': 0,
        'bsp_leaves': 0,
        'corridors_spanning': 0,
        'corridors_loop': 0,
        'corridor_fallbacks': 0,
        'variety_creatures': 0,
        'alcoves': 0,
        'rest_areas': 0,
        'decorations': 0,
        'door_candidates': 0,
        'doors_skipped': 0,
        'door_clusters_reduced': 0,
        'doors_created': 0,
        'doors_locked': 0,
        'doors_trapped': 0,
        'chests_in_rooms': 0,
        'creatures_placed': 0,
        'keys_placed': 0,
        'keys_unplaced': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
