from django import template

register = template.Library()


@register.filter(name="pad")
def pad(value, width: int = 0):
    """Zero-pad numeric values; pass through strings unchanged.

    Usage: {{ episode|pad:2 }} -> '03' when episode=3.
    """
    try:
        w = int(width)
    except (TypeError, ValueError):
        w = 0
    try:
        num = int(value)
        return str(num).zfill(w)
    except (TypeError, ValueError):
        return "" if value is None else str(value)


@register.simple_tag
def episode_code(season, episode) -> str:
    """Render 'S01E03', 'S01' or '' for an event's season/episode."""
    if season is None:
        return ""
    code = f"S{pad(season, 2)}"
    if episode is not None:
        code += f"E{pad(episode, 2)}"
    return code

