"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

FAILURE_NAMES = [
    "ref_compile_failed",
    "test_compile_failed",
    "ref_run_failed",
    "test_run_failed",
    "output_mismatch",
]

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "ccdiff report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "cases"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": [
                "total",
                "passed",
                "failed",
                "first_seed",
                "last_seed",
                "std",
                "reference",
                "test",
                "workdir",
                "workdir_removed",
                "duration_s",
            ],
            "properties": {
                "total": {"type": "integer", "minimum": 0},
                "passed": {"type": "integer", "minimum": 0},
                "failed": {"type": "integer", "minimum": 0},
                "first_seed": {"type": "integer", "minimum": 0},
                "last_seed": {"type": "integer", "minimum": 0},
                "std": {"type": "string"},
                "reference": {"type": "string"},
                "test": {"type": "string"},
                "workdir": {"type": "string"},
                "workdir_removed": {"type": "boolean"},
                "duration_s": {"type": "number"},
                "aborted": {"type": ["string", "null"]},
            },
        },
        "cases": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["seed", "id", "status", "source", "failures", "duration_ms"],
                "properties": {
                    "seed": {"type": "integer"},
                    "id": {"type": "string", "pattern": "^[0-9]{5,}$"},
                    "status": {"enum": ["passed", "failed"]},
                    "source": {"type": "string"},
                    "duration_ms": {"type": "number"},
                    "failures": {
                        "type": "array",
                        "items": {"enum": FAILURE_NAMES},
                        "uniqueItems": True,
                    },
                    "details": {"type": "array", "items": {"type": "string"}},
                    "scripts": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
    },
}
