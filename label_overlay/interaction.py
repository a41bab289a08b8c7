"""Pointer-driven label placement over scaled preview surfaces.

The host UI forwards discrete pointer events; the controller answers each
one synchronously with the cursor to show and the labels whose previews
need a redraw. All mutable editor state lives in :class:`EditorState` and
only changes through controller transitions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Any, Iterable

from .errors import InvalidLabelConfig
from .label_types import LabelBounds, LabelConfig
from .layout import layout_label
from .utils import (
    PREVIEW_MAX_HEIGHT,
    PREVIEW_MAX_WIDTH,
    clamp_delay,
    clamp_font_size,
    compute_fit_scale,
    scaled_dimensions,
)

logger = logging.getLogger(__name__)


class LabelId(IntEnum):
    FIRST = 1
    SECOND = 2


class PositionPolicy(Enum):
    """Whether dragging one label moves both labels or only itself."""

    SYNCHRONIZED = "synchronized"
    INDEPENDENT = "independent"


class Cursor(str, Enum):
    DEFAULT = "default"
    GRAB = "grab"
    GRABBING = "grabbing"


class PointerKind(Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"


SHARED_STYLE_FIELDS = frozenset(
    {
        "color",
        "background_color",
        "background_opacity",
        "font_size",
        "padding",
        "font_face",
    }
)


@dataclass(frozen=True)
class SurfaceView:
    """A preview surface showing one image shrunk by ``scale``.

    ``labels`` is the draw order of the labels painted on the surface;
    the last entry is drawn on top.
    """

    native_width: int
    native_height: int
    scale: float
    labels: tuple[LabelId, ...]

    @classmethod
    def fit(
        cls,
        native_width: int,
        native_height: int,
        labels: Iterable[LabelId],
        max_width: float = PREVIEW_MAX_WIDTH,
        max_height: float = PREVIEW_MAX_HEIGHT,
    ) -> "SurfaceView":
        scale = compute_fit_scale(native_width, native_height, max_width, max_height)
        return cls(native_width, native_height, scale, tuple(labels))

    @property
    def width(self) -> int:
        return scaled_dimensions(self.native_width, self.native_height, self.scale)[0]

    @property
    def height(self) -> int:
        return scaled_dimensions(self.native_width, self.native_height, self.scale)[1]


@dataclass(frozen=True)
class DragSession:
    label: LabelId
    surface: LabelId
    offset_x: float
    offset_y: float


@dataclass(frozen=True)
class PointerEvent:
    kind: PointerKind
    surface: LabelId
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class InteractionResult:
    cursor: Cursor
    changed: tuple[LabelId, ...] = ()


def _default_labels() -> dict[LabelId, LabelConfig]:
    return {
        LabelId.FIRST: LabelConfig(text="before"),
        LabelId.SECOND: LabelConfig(text="after"),
    }


@dataclass
class EditorState:
    labels: dict[LabelId, LabelConfig] = field(default_factory=_default_labels)
    surfaces: dict[LabelId, SurfaceView] = field(default_factory=dict)
    drag: DragSession | None = None
    policy: PositionPolicy = PositionPolicy.SYNCHRONIZED
    delay_ms: int = 1000


class InteractionController:
    """Single-threaded state machine: idle until a label is grabbed, then dragging."""

    def __init__(self, state: EditorState | None = None) -> None:
        self.state = state if state is not None else EditorState()

    @property
    def dragging(self) -> bool:
        return self.state.drag is not None

    def _idle_cursor(self) -> Cursor:
        return Cursor.GRABBING if self.dragging else Cursor.DEFAULT

    # surfaces

    def set_image(
        self,
        which: LabelId,
        width: int,
        height: int,
        max_width: float = PREVIEW_MAX_WIDTH,
        max_height: float = PREVIEW_MAX_HEIGHT,
        labels: Iterable[LabelId] | None = None,
    ) -> SurfaceView:
        """Attach a decoded image's size to the preview surface ``which``."""

        shown = tuple(labels) if labels is not None else (which,)
        surface = SurfaceView.fit(width, height, shown, max_width, max_height)
        self.state.surfaces[which] = surface
        if self.state.drag is not None and self.state.drag.surface == which:
            self.state.drag = None
        return surface

    def clear_image(self, which: LabelId) -> None:
        self.state.surfaces.pop(which, None)
        if self.state.drag is not None and self.state.drag.surface == which:
            self.state.drag = None

    def size_mismatch(self) -> tuple[tuple[int, int], tuple[int, int]] | None:
        """Return both native sizes when two images are attached and differ."""

        first = self.state.surfaces.get(LabelId.FIRST)
        second = self.state.surfaces.get(LabelId.SECOND)
        if first is None or second is None:
            return None
        first_size = (first.native_width, first.native_height)
        second_size = (second.native_width, second.native_height)
        if first_size == second_size:
            return None
        return first_size, second_size

    # hit-testing

    def label_bounds(self, surface_id: LabelId, which: LabelId) -> LabelBounds:
        surface = self.state.surfaces[surface_id]
        return layout_label(
            self.state.labels[which],
            surface.width,
            surface.height,
            surface.scale,
        )

    def hit_test(self, surface_id: LabelId, x: float, y: float) -> LabelId | None:
        """Return the topmost label under ``(x, y)`` on the surface, if any."""

        surface = self.state.surfaces.get(surface_id)
        if surface is None:
            return None
        for which in reversed(surface.labels):
            if self.label_bounds(surface_id, which).contains(x, y):
                return which
        return None

    # pointer transitions

    def handle(self, event: PointerEvent) -> InteractionResult:
        if event.kind is PointerKind.DOWN:
            return self.pointer_down(event.surface, event.x, event.y)
        if event.kind is PointerKind.MOVE:
            return self.pointer_move(event.surface, event.x, event.y)
        if event.kind is PointerKind.UP:
            return self.pointer_up(event.surface)
        return self.pointer_leave(event.surface)

    def pointer_down(self, surface_id: LabelId, x: float, y: float) -> InteractionResult:
        if self.state.drag is not None:
            return InteractionResult(Cursor.GRABBING)

        which = self.hit_test(surface_id, x, y)
        if which is None:
            return InteractionResult(Cursor.DEFAULT)

        scale = self.state.surfaces[surface_id].scale
        label = self.state.labels[which]
        self.state.drag = DragSession(
            label=which,
            surface=surface_id,
            offset_x=x - label.x * scale,
            offset_y=y - label.y * scale,
        )
        logger.debug("Grabbed label %d on surface %d", which, surface_id)
        return InteractionResult(Cursor.GRABBING)

    def pointer_move(self, surface_id: LabelId, x: float, y: float) -> InteractionResult:
        drag = self.state.drag
        if drag is None:
            hovering = self.hit_test(surface_id, x, y) is not None
            return InteractionResult(Cursor.GRAB if hovering else Cursor.DEFAULT)
        if drag.surface != surface_id:
            return InteractionResult(Cursor.DEFAULT)

        scale = self.state.surfaces[surface_id].scale
        new_x = (x - drag.offset_x) / scale
        new_y = (y - drag.offset_y) / scale

        if self.state.policy is PositionPolicy.SYNCHRONIZED:
            targets = tuple(self.state.labels)
        else:
            targets = (drag.label,)
        for which in targets:
            self.state.labels[which] = self.state.labels[which].moved_to(new_x, new_y)
        return InteractionResult(Cursor.GRABBING, changed=targets)

    def pointer_up(self, surface_id: LabelId | None = None) -> InteractionResult:
        return self._end_drag()

    def pointer_leave(self, surface_id: LabelId | None = None) -> InteractionResult:
        return self._end_drag()

    def _end_drag(self) -> InteractionResult:
        if self.state.drag is not None:
            logger.debug("Released label %d", self.state.drag.label)
        self.state.drag = None
        return InteractionResult(Cursor.DEFAULT)

    # control bindings

    def update_label(self, which: LabelId, **changes: Any) -> InteractionResult:
        """Apply per-label control changes (text, style, position)."""

        updated = replace(self.state.labels[which], **changes)
        updated.validate()
        self.state.labels[which] = updated
        return InteractionResult(self._idle_cursor(), changed=(which,))

    def apply_shared_style(self, **changes: Any) -> InteractionResult:
        """Apply style controls shared by both labels; all-or-nothing."""

        for name in changes:
            if name not in SHARED_STYLE_FIELDS:
                raise InvalidLabelConfig(name, "is not a shared style control")
        if "font_size" in changes:
            changes["font_size"] = clamp_font_size(float(changes["font_size"]))

        updated = {
            which: replace(label, **changes)
            for which, label in self.state.labels.items()
        }
        for label in updated.values():
            label.validate()
        self.state.labels.update(updated)
        return InteractionResult(self._idle_cursor(), changed=tuple(updated))

    def set_delay(self, delay_ms: int) -> int:
        self.state.delay_ms = clamp_delay(int(delay_ms))
        return self.state.delay_ms


__all__ = [
    "Cursor",
    "DragSession",
    "EditorState",
    "InteractionController",
    "InteractionResult",
    "LabelId",
    "PointerEvent",
    "PointerKind",
    "PositionPolicy",
    "SurfaceView",
]
