from .composite_bag import CompositeBagModel, resolve_variable_definition, new_entity_map

__all__ = ["CompositeBagModel", "resolve_variable_definition", "new_entity_map"]
