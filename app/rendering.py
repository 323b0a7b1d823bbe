from markupsafe import Markup, escape


def render_output(text: str, allow_raw_html: bool = False) -> str:
    """Return the markup that the page inserts into the output panel.

    Model output is escaped unless ``allow_raw_html`` is set. Raw mode inserts
    whatever the model returned, scripts included, so it is only safe for
    trusted deployments.
    """
    if allow_raw_html:
        return str(Markup(text))
    return str(escape(text))
