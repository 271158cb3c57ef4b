"""Shape and text helpers shared by every layout routine.

Every helper takes the target rectangle in inches and refuses to place
anything whose (rotated) bounding box leaves the safe content area.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from pptx.dml.color import RGBColor
from pptx.enum.dml import MSO_LINE_DASH_STYLE
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, MSO_AUTO_SIZE, PP_ALIGN
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.util import Inches, Pt

from deckwright.domain.exceptions import RenderError
from deckwright.infra.rendering.geometry import SAFE_AREA, Rect, rotated_bounds

if TYPE_CHECKING:
    from pptx.presentation import Presentation
    from pptx.shapes.autoshape import Shape
    from pptx.shapes.picture import Picture
    from pptx.slide import Slide
    from pptx.text.text import _Paragraph

    from deckwright.infra.rendering.context import RenderContext

BLANK_LAYOUT = 6
ELLIPSIS = "..."
BULLET_CHAR = "•"

# Bullet hanging indent: text at 0.35", bullet character at 0"
BULLET_MARGIN_EMU = 320040
BULLET_INDENT_EMU = -320040


def rgb(hex_value: str) -> RGBColor:
    return RGBColor.from_string(hex_value.lstrip("#").upper())


def truncate(text: Optional[str], limit: int) -> str:
    """Hard cap with a trailing ellipsis; the last-resort guard behind auto-fit."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def check_placement(rect: Rect, rotation: float = 0.0, name: str = "shape") -> None:
    bounds = rotated_bounds(rect, rotation)
    if not SAFE_AREA.contains(bounds):
        raise RenderError(
            f"{name} at ({bounds.x:.2f}, {bounds.y:.2f}, {bounds.w:.2f}, {bounds.h:.2f}) "
            "leaves the safe content area"
        )


def new_slide(prs: "Presentation", ctx: "RenderContext") -> "Slide":
    """Blank slide painted with the theme background."""
    slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT])
    fill = slide.background.fill
    fill.solid()
    fill.fore_color.rgb = rgb(ctx.theme.colors.background)
    return slide


# ---------- XML effects ----------
def _set_srgb_alpha(parent, alpha01: float) -> None:
    """Set ``a:alpha`` on the ``a:srgbClr`` of a solid fill under ``parent``."""
    solid = parent.find(qn("a:solidFill"))
    if solid is None:
        return
    clr = solid.find(qn("a:srgbClr"))
    if clr is None:
        return
    for tag in ("a:alpha", "a:alphaMod", "a:alphaOff"):
        existing = clr.find(qn(tag))
        if existing is not None:
            clr.remove(existing)
    # a:alpha val is 0..100000 (percent * 1000)
    alpha = OxmlElement("a:alpha")
    alpha.set("val", str(int(round(max(0.0, min(1.0, alpha01)) * 100000))))
    clr.append(alpha)


def set_fill_alpha(shape: "Shape", alpha01: float) -> None:
    _set_srgb_alpha(shape._element.spPr, alpha01)


def set_text_alpha(shape: "Shape", alpha01: float) -> None:
    for paragraph in shape.text_frame.paragraphs:
        for run in paragraph.runs:
            _set_srgb_alpha(run._r.get_or_add_rPr(), alpha01)


def set_picture_alpha(picture: "Picture", alpha01: float) -> None:
    blip = picture._element.blipFill.find(qn("a:blip"))
    if blip is None:
        return
    fix = OxmlElement("a:alphaModFix")
    fix.set("amt", str(int(round(alpha01 * 100000))))
    blip.insert(0, fix)


def apply_shadow(shape: "Shape", blur_pt: float = 6, distance_pt: float = 2) -> None:
    """Soft outer drop shadow below-right of the shape."""
    spPr = shape._element.spPr
    effects = spPr.find(qn("a:effectLst"))
    if effects is None:
        effects = OxmlElement("a:effectLst")
        spPr.append(effects)
    shadow = OxmlElement("a:outerShdw")
    shadow.set("blurRad", str(Pt(blur_pt)))
    shadow.set("dist", str(Pt(distance_pt)))
    shadow.set("dir", "2700000")
    shadow.set("algn", "ctr")
    shadow.set("rotWithShape", "0")
    color = OxmlElement("a:srgbClr")
    color.set("val", "000000")
    alpha = OxmlElement("a:alpha")
    alpha.set("val", "40000")
    color.append(alpha)
    shadow.append(color)
    effects.append(shadow)


# ---------- text ----------
def _style_paragraph(
    paragraph: "_Paragraph",
    text: str,
    *,
    font: str,
    size: int,
    color: str,
    bold: bool = False,
    italic: bool = False,
    align=PP_ALIGN.CENTER,
    hyperlink: Optional[str] = None,
):
    paragraph.alignment = align
    run = paragraph.add_run()
    run.text = text
    run.font.name = font
    run.font.size = Pt(size)
    run.font.bold = bold
    run.font.italic = italic
    run.font.color.rgb = rgb(color)
    if hyperlink:
        run.hyperlink.address = hyperlink
        run.font.underline = True
    return run


def _prepare_frame(shape: "Shape", margin_pt: float, anchor) -> None:
    frame = shape.text_frame
    frame.word_wrap = True
    frame.auto_size = MSO_AUTO_SIZE.TEXT_TO_FIT_SHAPE
    frame.vertical_anchor = anchor
    frame.margin_left = frame.margin_right = Pt(margin_pt)
    frame.margin_top = frame.margin_bottom = Pt(margin_pt)


def add_text(
    slide: "Slide",
    rect: Rect,
    text: str,
    *,
    font: str,
    size: int,
    color: str,
    bold: bool = False,
    italic: bool = False,
    align=PP_ALIGN.CENTER,
    anchor=MSO_ANCHOR.MIDDLE,
    rotation: float = 0.0,
    shadow: bool = False,
    margin_pt: float = 6,
    name: Optional[str] = None,
) -> "Shape":
    """Single-paragraph text box with a shrink-to-fit hint."""
    check_placement(rect, rotation, name or "text")
    box = slide.shapes.add_textbox(
        Inches(rect.x), Inches(rect.y), Inches(rect.w), Inches(rect.h)
    )
    _prepare_frame(box, margin_pt, anchor)
    _style_paragraph(
        box.text_frame.paragraphs[0],
        text,
        font=font,
        size=size,
        color=color,
        bold=bold,
        italic=italic,
        align=align,
    )
    if rotation:
        box.rotation = rotation
    if name:
        box.name = name
    if shadow:
        apply_shadow(box)
    return box


def add_bullet(paragraph: "_Paragraph") -> None:
    """Paragraph-level bullet marker with a hanging indent."""
    pPr = paragraph._element.get_or_add_pPr()
    pPr.set("marL", str(BULLET_MARGIN_EMU))
    pPr.set("indent", str(BULLET_INDENT_EMU))
    bullet = OxmlElement("a:buChar")
    bullet.set("char", BULLET_CHAR)
    pPr.append(bullet)


def add_bullets(
    slide: "Slide",
    rect: Rect,
    items: Sequence[str],
    ctx: "RenderContext",
    *,
    limit: int,
    links: Optional[Sequence[Optional[str]]] = None,
    name: str = "Bullets",
) -> Optional["Shape"]:
    """All bullets in ONE text box, one bulleted paragraph each.

    A single box lets auto-fit shrink the whole block together, so bullets can
    never collide however many there are or however long they run.
    """
    if not items:
        return None
    theme = ctx.theme
    check_placement(rect, 0.0, name)
    box = slide.shapes.add_textbox(
        Inches(rect.x), Inches(rect.y), Inches(rect.w), Inches(rect.h)
    )
    box.name = name
    _prepare_frame(box, 8, MSO_ANCHOR.TOP)
    frame = box.text_frame

    for index, item in enumerate(items):
        paragraph = frame.paragraphs[0] if index == 0 else frame.add_paragraph()
        paragraph.space_after = Pt(theme.design.paragraph_spacing_pt)
        paragraph.line_spacing = 1.15
        _style_paragraph(
            paragraph,
            truncate(item, limit),
            font=theme.fonts.secondary,
            size=theme.sizes.bullet,
            color=theme.colors.text,
            align=PP_ALIGN.LEFT,
            hyperlink=links[index] if links else None,
        )
        add_bullet(paragraph)
    return box


# ---------- shapes ----------
def add_decoration(
    slide: "Slide",
    kind: MSO_SHAPE,
    rect: Rect,
    color: str,
    *,
    alpha: Optional[float] = None,
    rotation: float = 0.0,
    name: str = "Decoration",
) -> "Shape":
    """Filled accent shape without outline."""
    check_placement(rect, rotation, name)
    shape = slide.shapes.add_shape(
        kind, Inches(rect.x), Inches(rect.y), Inches(rect.w), Inches(rect.h)
    )
    shape.name = name
    shape.fill.solid()
    shape.fill.fore_color.rgb = rgb(color)
    shape.line.fill.background()
    shape.shadow.inherit = False
    if rotation:
        shape.rotation = rotation
    if alpha is not None:
        set_fill_alpha(shape, alpha)
    return shape


def add_underline(slide: "Slide", rect: Rect, ctx: "RenderContext") -> "Shape":
    """Accent bar under a title; a two-stop gradient when the theme asks for it."""
    colors = ctx.theme.colors
    shape = add_decoration(
        slide, MSO_SHAPE.RECTANGLE, rect, colors.accent, name="Underline"
    )
    if ctx.theme.design.use_gradients:
        fill = shape.fill
        fill.gradient()
        fill.gradient_angle = 0
        fill.gradient_stops[0].color.rgb = rgb(colors.primary)
        fill.gradient_stops[1].color.rgb = rgb(colors.accent)
    return shape


def add_frame(
    slide: "Slide",
    rect: Rect,
    color: str,
    ctx: "RenderContext",
    *,
    width_pt: Optional[float] = None,
    dashed: bool = True,
    name: str = "Frame",
) -> "Shape":
    """Unfilled border; rounded when the theme has a corner radius."""
    check_placement(rect, 0.0, name)
    design = ctx.theme.design
    kind = MSO_SHAPE.ROUNDED_RECTANGLE if design.corner_radius > 0 else MSO_SHAPE.RECTANGLE
    shape = slide.shapes.add_shape(
        kind, Inches(rect.x), Inches(rect.y), Inches(rect.w), Inches(rect.h)
    )
    shape.name = name
    if design.corner_radius > 0:
        shortest_pt = min(rect.w, rect.h) * 72
        shape.adjustments[0] = min(0.5, design.corner_radius / shortest_pt)
    shape.fill.background()
    shape.shadow.inherit = False
    line = shape.line
    line.color.rgb = rgb(color)
    line.width = Pt(width_pt if width_pt is not None else design.line_weight_pt)
    if dashed:
        line.dash_style = MSO_LINE_DASH_STYLE.DASH
    return shape
