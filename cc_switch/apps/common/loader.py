_LOADED = False


def load_app_projector_modules() -> None:
    global _LOADED
    if _LOADED:
        return

    from cc_switch.apps.claude import projector as _claude_projector  # noqa: F401
    from cc_switch.apps.codex import projector as _codex_projector  # noqa: F401
    from cc_switch.apps.gemini import projector as _gemini_projector  # noqa: F401
    from cc_switch.apps.opencode import projector as _opencode_projector  # noqa: F401

    _LOADED = True
