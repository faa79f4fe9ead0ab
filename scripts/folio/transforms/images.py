"""
Chapter and appendix illustrations.

If ``images/chapters/ch<N>.png`` (or ``images/appendices/app<L>.png``)
exists, an image reference is placed directly under the title heading.
The images are copied to ``build/assets/images`` before rendering, so the
emitted path depends on where pandoc resolves it from:

    root      pandoc runs from the project root (PDF)
              → build/assets/images/chapters/ch1.png
    relative  output sits in its own build/<target>/ folder (HTML, EPUB)
              → ../assets/images/chapters/ch1.png
"""

from folio.roles import Appendix, Chapter


IMAGE_PREFIXES = {
    "root": "build/assets/",
    "relative": "../assets/",
}


def image_path_for(role):
    """Project-relative illustration path for a role, or None."""
    if isinstance(role, Chapter):
        return f"images/chapters/ch{role.number}.png"
    if isinstance(role, Appendix):
        return f"images/appendices/app{role.letter}.png"
    return None


def inject_image(role, text, image_exists, image_style, log=None):
    """
    Insert the role's illustration after the first level-1 heading.

    Args:
        role:         Role of the file
        text:         Markdown source
        image_exists: Callable taking a project-relative path
        image_style:  "root" or "relative" (from the RenderTarget)
        log:          Optional callable for informational messages

    The reference carries no alt text so pandoc renders no caption.
    """
    relative = image_path_for(role)
    if relative is None or not image_exists(relative):
        return text

    lines = text.split("\n")
    title_index = next(
        (i for i, line in enumerate(lines) if line.startswith("# ")), None
    )
    if title_index is None:
        if log:
            log(f"  No title heading for {role}; image not added")
        return text

    lines.insert(title_index + 1, f"\n![]({IMAGE_PREFIXES[image_style]}{relative})\n")
    if log:
        log(f"  Added image for {role}")
    return "\n".join(lines)
