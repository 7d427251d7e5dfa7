"""Domain layer: entities, errors and the contracts the pipeline depends on."""
