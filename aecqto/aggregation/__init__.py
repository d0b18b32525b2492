"""Per-type aggregation of resolved element quantities."""

from aecqto.aggregation.aggregator import aggregate, default_group_key, merge_aggregates, sorted_groups

__all__ = ["aggregate", "default_group_key", "merge_aggregates", "sorted_groups"]
