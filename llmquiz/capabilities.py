"""
Static capability descriptor queried by the host platform.
"""

from types import MappingProxyType

MOD_PURPOSE_CONTENT = "content"

SUPPORTED_FEATURES = MappingProxyType({
    "mod_intro": True,
    "show_description": True,
    "backup": True,
    "mod_purpose": MOD_PURPOSE_CONTENT,
})


def supports(feature: str):
    """Value declared for feature, or None when the feature is unknown."""
    return SUPPORTED_FEATURES.get(feature)
