from typing import Dict


def init_metrics() -> Dict[str, int | float | bool]:
    return {
        'spine_tiles': 0,
        'fork_points': 0,
        'seeds_ejected': 0,
        'seeds_alive': 0,
        'seeds_dud': 0,
        'seeds_collided': 0,
        'seeds_wall': 0,
        'rooms': 0,
        'tiles_floor': 0,
        'tiles_wall': 0,
        'doors': 0,
        'traps': 0,
        'unreachable_rooms': 0,
        'runtime_ms': 0.0,
    }


def collect_metrics(metrics: Dict, state, data, analysis) -> Dict:
    """Fill ``metrics`` from a finished run."""
    seeds = state.seeds
    metrics['spine_tiles'] = len(state.spine)
    metrics['fork_points'] = sum(1 for t in state.spine if t.is_fork_point)
    metrics['seeds_ejected'] = len(seeds)
    metrics['seeds_alive'] = sum(1 for s in seeds if s.is_alive)
    metrics['seeds_dud'] = sum(1 for s in seeds if s.cull_reason == 'dud')
    metrics['seeds_collided'] = sum(1 for s in seeds if s.cull_reason == 'collision')
    metrics['seeds_wall'] = sum(1 for s in seeds if s.is_wall_seed)
    metrics['rooms'] = len(data.rooms)
    metrics['tiles_floor'] = len(data.floor_tiles)
    metrics['tiles_wall'] = len(data.wall_tiles)
    metrics['doors'] = sum(1 for o in data.objects if o.type == 'door')
    metrics['traps'] = sum(1 for o in data.objects if o.type == 'trap')
    metrics['unreachable_rooms'] = len(analysis.unreachable_rooms)
    return metrics
