"""JSON schema for batch configuration validation."""

from __future__ import annotations

from dc_sim.schedulers import Algorithm

BATCH_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Datacenter Batch Config",
    "type": "object",
    "required": ["inputs", "algorithms"],
    "properties": {
        "version": {"type": "string"},
        "inputs": {
            "type": "array",
            "minItems": 1,
            "items": {"type": "string", "minLength": 1},
        },
        "algorithms": {
            "type": "array",
            "minItems": 1,
            "uniqueItems": True,
            "items": {"type": "string", "enum": [algorithm.value for algorithm in Algorithm]},
        },
        "output_dir": {"type": "string", "minLength": 1},
        "until": {"type": "integer", "minimum": 1},
    },
    "additionalProperties": False,
}
