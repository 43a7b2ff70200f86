"""Transcript selection state (pure Python, no Qt dependency).

Two mutually exclusive modes: a character selection mirrored from the text
view, or a set of whole blocks picked from the gutter.
"""

from __future__ import annotations


class SelectionModel:
    """Character selection or block selection, never both."""

    def __init__(self) -> None:
        self.anchor: int = 0
        self.head: int = 0
        self._blocks: list[int] = []
        self.last_clicked_block: int = -1

    # ---- character selection ----

    @property
    def char_range(self) -> tuple[int, int]:
        return min(self.anchor, self.head), max(self.anchor, self.head)

    def has_char_selection(self) -> bool:
        return self.anchor != self.head

    def set_char_selection(self, anchor: int, head: int) -> None:
        """Mirror the view's cursor. A non-empty selection drops the block set."""
        self.anchor = anchor
        self.head = head
        if anchor != head:
            self._blocks.clear()

    def clear_char_selection(self) -> None:
        self.anchor = self.head

    # ---- block selection ----

    @property
    def selected_blocks(self) -> list[int]:
        """Selected block indices in click order."""
        return list(self._blocks)

    def sorted_blocks(self) -> list[int]:
        return sorted(self._blocks)

    def has_block_selection(self) -> bool:
        return bool(self._blocks)

    def is_block_selected(self, index: int) -> bool:
        return index in self._blocks

    def block_clicked(self, index: int, ctrl: bool = False, shift: bool = False) -> list[int]:
        """Apply a gutter click on block *index* and return the new selection.

        - plain click: select only *index*
        - Ctrl-click: toggle *index*; deselecting keeps ``last_clicked_block``
        - Shift-click: add the range from ``last_clicked_block`` to *index*
        """
        if index < 0:
            return self.selected_blocks
        self.clear_char_selection()
        if index in self._blocks:
            if ctrl:
                self._blocks.remove(index)
                return self.selected_blocks
            self._blocks = [index]
        elif ctrl:
            self._blocks.append(index)
        elif shift and self.last_clicked_block > -1:
            low = min(self.last_clicked_block, index)
            high = max(self.last_clicked_block, index)
            for i in range(low, high + 1):
                if i not in self._blocks:
                    self._blocks.append(i)
        else:
            self._blocks = [index]
        self.last_clicked_block = index
        return self.selected_blocks

    def reset(self) -> None:
        self.anchor = self.head = 0
        self._blocks.clear()
        self.last_clicked_block = -1
