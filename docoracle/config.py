"""Configuration for docoracle"""

import copy
import logging
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from docoracle.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


# ===========================================
# Oracle Rendering
# ===========================================

# Symbolic placeholder for the value returned by the documented member.
# Downstream consumers bind it; nothing here evaluates it.
RETURN_VALUE = "RESULT"

# Return types compared with == instead of .equals(...)
PRIMITIVE_TYPES = [
    "boolean", "byte", "char", "short", "int", "long", "float", "double",
]


# ===========================================
# Equivalence Detection
# ===========================================

EQUIVALENCE_PHRASES = {
    # Exact equivalence: similarity = False unless a guard keyword is present
    "exact": [
        r"equivalent\s+to",
        r"equivalent\s+of",
        r"same\s+result\s+as",
        r"same\s+as",
        r"identical\s+to",
        r"equal\s+to",
        r"equals",
        r"is\s+like\s+calling",
        r"shorthand\s+for",
        r"alias\s+for",
        r"synonym\s+for",
        r"delegates\s+to",
    ],
    # Approximate equivalence: similarity = True
    "similar": [
        r"similar\s+to",
        r"analogous\s+to",
        r"behaves\s+like",
        r"works\s+like",
        r"corresponds\s+to",
        r"comparable\s+to",
        r"like",
    ],
}

NEGATION_WORDS = [
    "not", "never", "no", "isn't", "doesn't", "cannot", "can't", "won't",
]

GUARD_KEYWORDS = ["if", "when"]


# ===========================================
# Overload Resolution
# ===========================================

# Java primitive widening conversions (JLS 5.1.2), one edge per step
PRIMITIVE_WIDENING = {
    "byte": ["short"],
    "short": ["int"],
    "char": ["int"],
    "int": ["long"],
    "long": ["float"],
    "float": ["double"],
}

BOXED_TYPES = {
    "boolean": "Boolean",
    "byte": "Byte",
    "char": "Character",
    "short": "Short",
    "int": "Integer",
    "long": "Long",
    "float": "Float",
    "double": "Double",
}


DEFAULT_CONFIG: Dict[str, Any] = {
    "return_value": RETURN_VALUE,
    "primitive_types": PRIMITIVE_TYPES,

    # =========================================================================
    # SENTENCES
    # =========================================================================
    "sentences": {
        "split_pattern": r"[.;] ",
        "min_length": 3,          # Sentences shorter than this are noise
    },

    # =========================================================================
    # EQUIVALENCE DETECTION
    # =========================================================================
    "equivalence": {
        "phrases": EQUIVALENCE_PHRASES,
        "negation_words": NEGATION_WORDS,
        "guard_keywords": GUARD_KEYWORDS,
    },

    # =========================================================================
    # CONDITION EXTRACTION
    # =========================================================================
    "condition_extraction": {
        "strategy": "comma",      # "comma" | "sentence_end"
    },

    # =========================================================================
    # SUBJECT MATCHING
    # =========================================================================
    "subject_matching": {
        "fuzzy": True,            # Enables case-insensitive and stemmed tiers
    },

    # =========================================================================
    # OVERLOAD RESOLUTION
    # =========================================================================
    "overload_resolution": {
        "unknown_argument_cost": 2,
        "null_argument_cost": 1,
        "varargs_cost": 3,
        "max_total_cost": 10,
    },

    # =========================================================================
    # VALIDATION
    # =========================================================================
    "validation": {
        "validator": "structural",   # "structural" | "javac"
        "javac_path": "javac",
        "timeout_seconds": 30,
    },
}


_active_config: Optional[Dict[str, Any]] = None


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file and merge it over the defaults.

    The merged configuration becomes the active one returned by get_config().

    Args:
        path: YAML file with any subset of the DEFAULT_CONFIG keys

    Returns:
        The merged configuration dictionary

    Raises:
        ConfigurationError: If the file is missing or is not a YAML mapping
    """
    global _active_config

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file '{path}' could not be found.") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Configuration file '{path}' is not valid YAML: {e}") from e

    if not isinstance(overrides, dict):
        raise ConfigurationError(f"Configuration file '{path}' must contain a mapping")

    unknown = set(overrides) - set(DEFAULT_CONFIG)
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")
        overrides = {k: v for k, v in overrides.items() if k not in unknown}

    _active_config = _deep_merge(DEFAULT_CONFIG, overrides)
    logger.info(f"Loaded configuration from {path}")
    return _active_config


def reset_config():
    """Drop any loaded overrides and return to DEFAULT_CONFIG"""
    global _active_config
    _active_config = None


def get_config() -> Dict[str, Any]:
    """Get full configuration dictionary"""
    if _active_config is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    return _active_config
