########## LICENCE ##########
# seqspan
# Copyright (C) 2024 Genome Research Ltd
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
#############################

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from .annotation import (
    Annotation,
    apply_edits,
    merge_ranges,
    subtract_from_selection
)
from .backend import (
    AnnotationDeletedMessage,
    AnnotationMessage,
    Backend,
    DeleteMessage,
    InsertMessage,
    PendingEdits
)
from .clipboard import CopyOverlay, build_copy_overlay
from .config import EditorConfig
from .constants import ANNOTATION_ID_PREFIX
from .enums import EditType, InsertSelection, MergeDirection, PasteMode
from .errors import AnnotationNotFound, InvalidEdit, SelectionError
from .fenced_range import Range
from .selection import SelectionDomain
from .span import Span, parse_span
from .splice import (
    SpliceEdit,
    get_deletion_edits,
    get_post_delete_selection,
    get_post_insert_selection,
    get_post_replace_selection
)
from .strings.seq_str import SeqStr
from .utils import filter_nucleotides, has_duplicates


@dataclass(slots=True, frozen=True)
class EditResult:
    """Outcome of an edit: the applied edit events, the new selection and the annotations it changed"""

    events: list[dict[str, Any]]
    selection: Span | None
    annotations: list[Annotation] = field(default_factory=list)
    degenerate: list[str] = field(default_factory=list)
    collapsed: list[str] = field(default_factory=list)

    @property
    def event(self) -> dict[str, Any]:
        return self.events[0]


def _get_annotation_message(annotation: Annotation) -> AnnotationMessage:
    return AnnotationMessage(
        annotation_id=annotation.id,
        caption=annotation.caption,
        type=annotation.type,
        span=str(annotation.span),
        attributes=dict(annotation.attributes))


class EditorSession:
    """
    Sequence, annotations and selection kept consistent across edits

    Each edit is validated before any state is touched, then applied to the
    sequence, to the span of every annotation and to the selection; confirmed
    edits are forwarded to the backend, if any.
    """

    __slots__ = ['_sequence', '_annotations', 'selection', 'config', 'backend', 'pending']

    def __init__(
        self,
        sequence: str = '',
        annotations: Iterable[Annotation] | None = None,
        config: EditorConfig | None = None,
        backend: Backend | None = None
    ) -> None:
        self.config: EditorConfig = config if config is not None else EditorConfig()
        self._sequence: SeqStr = SeqStr.empty()
        self._annotations: list[Annotation] = []
        self.selection: SelectionDomain = SelectionDomain()
        self.pending: PendingEdits = PendingEdits()
        self.backend: Backend | None = backend
        self.set_sequence(sequence, annotations=annotations)

        if backend is not None:
            backend.on_ack(self.pending.ack)
            backend.on_error(self.pending.error)

    def __len__(self) -> int:
        return len(self._sequence)

    @property
    def sequence(self) -> SeqStr:
        return self._sequence

    @property
    def annotations(self) -> list[Annotation]:
        return list(self._annotations)

    @property
    def annotation_ids(self) -> list[str]:
        return [a.id for a in self._annotations]

    # Validation

    def _check_writable(self) -> None:
        if self.config.readonly:
            raise InvalidEdit("Editor is read-only!")

    def _filter_text(self, text: str) -> SeqStr:
        s = filter_nucleotides(text, alphabet=self.config.alphabet)
        if not s:
            raise InvalidEdit("Invalid text: no valid nucleotide symbols!")
        return SeqStr(s)

    def _validate_span(self, span: Span) -> None:
        if span.end > len(self._sequence):
            raise ValueError(
                f"Invalid span {span}: "
                f"beyond sequence length {len(self._sequence)}!")

    def _get_index(self, annotation_id: str) -> int:
        for i, annotation in enumerate(self._annotations):
            if annotation.id == annotation_id:
                return i
        raise AnnotationNotFound(annotation_id)

    def get_annotation(self, annotation_id: str) -> Annotation:
        return self._annotations[self._get_index(annotation_id)]

    # Backend notifications

    def _send(self, method: str, message) -> None:
        if self.backend is None:
            return
        self.pending.add(message)
        getattr(self.backend, method)(message)

    def _send_insert(self, position: int, text: str) -> None:
        self._send('insert', InsertMessage(position=position, text=text))

    def _send_delete(self, start: int, end: int) -> None:
        self._send('delete', DeleteMessage(start=start, end=end))

    # Sequence

    def set_sequence(self, sequence: str, annotations: Iterable[Annotation] | None = None) -> None:
        """Replace the whole document, clearing the selection"""

        seq = SeqStr.parse(sequence)
        a = list(annotations or [])
        if has_duplicates([x.id for x in a]):
            raise ValueError("Invalid annotations: duplicate identifiers!")
        for annotation in a:
            if annotation.span.end > len(seq):
                raise ValueError(
                    f"Invalid annotation '{annotation.id}': "
                    f"span {annotation.span} beyond sequence length {len(seq)}!")

        self._sequence = seq
        self._annotations = a
        self.selection.clear()

    def _apply_to_annotations(self, edits: Sequence[SpliceEdit]) -> tuple[list[Annotation], list[str], list[str]]:
        """
        Lift every annotation over the edits, in order

        Ranges removed by the edits are dropped from annotations keeping other
        ranges; annotations removed altogether are kept as a point.
        """

        changed: list[Annotation] = []
        degenerate: list[str] = []
        collapsed: list[str] = []
        annotations: list[Annotation] = []

        for annotation in self._annotations:
            update = apply_edits(annotation, edits)
            if update.degenerate:
                logging.info("Annotation '%s' collapsed to a point." % annotation.id)
                degenerate.append(annotation.id)
            elif update.collapsed:
                logging.info("Annotation '%s' lost %d ranges." % (annotation.id, len(update.collapsed)))
                collapsed.append(annotation.id)
            new_annotation = update.drop_collapsed()
            if update.changed:
                changed.append(new_annotation)
            annotations.append(new_annotation)

        self._annotations = annotations
        return changed, degenerate, collapsed

    def insert(self, position: int, text: str) -> EditResult:
        """Insert text at a position"""

        self._check_writable()
        seq = self._filter_text(text)
        edit = SpliceEdit.insertion(position, len(seq))
        edit.validate(len(self._sequence))

        self._sequence = self._sequence.insert_substr(position, seq)
        changed, degenerate, collapsed = self._apply_to_annotations([edit])
        self.selection.set_ranges(
            get_post_insert_selection(edit)
            if self.config.selection_on_insert == InsertSelection.CURSOR else
            get_post_replace_selection(edit))

        logging.debug("Inserted %d bases at %d." % (len(seq), position))
        self._send_insert(position, seq)

        return EditResult(
            [{'type': EditType.INSERT.value, 'position': position, 'text': str(seq)}],
            self.selection.span,
            changed,
            degenerate,
            collapsed)

    def delete(self, ranges: Sequence[Range]) -> EditResult:
        """Delete multiple ranges, from the highest to the lowest"""

        self._check_writable()
        n = len(self._sequence)
        edits = get_deletion_edits(ranges, sequence_length=n)

        seq = self._sequence
        for edit in edits:
            seq = seq.delete_substr(edit.removed_range)
        self._sequence = seq

        changed, degenerate, collapsed = self._apply_to_annotations(edits)
        self.selection.set_ranges(get_post_delete_selection(
            ranges, n, circular=self.config.circular))

        for edit in edits:
            logging.debug("Deleted range [%d, %d)." % (edit.start, edit.end))
            self._send_delete(edit.start, edit.end)

        return EditResult(
            [
                {'type': EditType.DELETE.value, 'start': edit.start, 'end': edit.end}
                for edit in edits
            ],
            self.selection.span,
            changed,
            degenerate,
            collapsed)

    def delete_selection(self) -> EditResult:
        if not self.selection.ranges:
            raise InvalidEdit("Nothing to delete: no selection!")
        return self.delete(self.selection.ranges)

    def replace(self, r: Range, text: str) -> EditResult:
        """Replace a range with text as a single edit, selecting the new text"""

        self._check_writable()
        seq = self._filter_text(text)
        edit = SpliceEdit.replacement(r, len(seq))
        edit.validate(len(self._sequence))

        self._sequence = self._sequence.replace_substr(r, seq)
        changed, degenerate, collapsed = self._apply_to_annotations([edit])
        self.selection.set_ranges(get_post_replace_selection(edit))

        logging.debug("Replaced range [%d, %d) with %d bases." % (r.start, r.end, len(seq)))
        if edit.removed_length > 0:
            self._send_delete(edit.start, edit.end)
        self._send_insert(edit.start, seq)

        return EditResult(
            [{
                'type': EditType.REPLACE.value,
                'start': edit.start,
                'end': edit.end,
                'text': str(seq)
            }],
            self.selection.span,
            changed,
            degenerate,
            collapsed)

    def replace_selection(self, text: str) -> EditResult:
        ranges = self.selection.ranges
        if not ranges:
            raise InvalidEdit("Nothing to replace: no selection!")
        if len(ranges) > 1:
            raise SelectionError("Cannot replace a selection of multiple ranges!")
        return self.replace(ranges[0], text)

    # Clipboard

    def copy(self) -> CopyOverlay:
        if not self.selection.ranges:
            raise SelectionError("Nothing to copy: no selection!")
        ranges = [r for r in self.selection.ranges if not r.is_cursor]
        if not ranges:
            raise SelectionError("Nothing to copy: empty selection!")
        return build_copy_overlay(self._sequence, ranges, self._annotations)

    def paste(self, text: str, overlay: CopyOverlay | None = None, mode: PasteMode = PasteMode.DEFAULT) -> EditResult:
        """
        Paste text at the cursor, or over a single selected range

        In include mode, the annotations carried by the copy overlay are
        recreated at the paste position if the text matches the copied one.
        """

        ranges = self.selection.ranges
        if not ranges:
            raise InvalidEdit("Nothing to paste onto: no selection!")
        if len(ranges) > 1:
            raise SelectionError("Cannot paste onto a selection of multiple ranges!")

        r = ranges[0]
        result = self.insert(r.start, text) if r.is_cursor else self.replace(r, text)

        if mode != PasteMode.INCLUDE or overlay is None:
            return result
        if not overlay.matches(result.events[-1]['text']):
            logging.debug("Pasted text differs from the copied one: annotations not included.")
            return result

        pasted = overlay.get_annotations(r.start)
        for annotation in pasted:
            self._annotations.append(annotation)
            self._send('annotation_created', _get_annotation_message(annotation))

        return EditResult(
            result.events,
            result.selection,
            [*result.annotations, *pasted],
            result.degenerate,
            result.collapsed)

    # Selection

    def select(self, text: str) -> bool:
        """Select by span notation or annotation (`a:<id>`)"""

        span = parse_span(text) if not text.strip().startswith(ANNOTATION_ID_PREFIX) else None
        if span is not None:
            self._validate_span(span)
        return self.selection.select(text, annotations=self._annotations)

    def set_cursor(self, position: int) -> None:
        if position > len(self._sequence):
            raise SelectionError(
                f"Invalid cursor position {position}: "
                f"beyond sequence length {len(self._sequence)}!")
        self.selection.set_cursor(position)

    def add_selection_range(self, start: int, end: int) -> Range:
        self._validate_span(Span((Range(start, end),)))
        return self.selection.add_range(start, end)

    def extend_selection(self, start: int, end: int) -> None:
        self._validate_span(Span((Range(start, end),)))
        self.selection.extend_to(start, end)

    def clear_selection(self) -> None:
        self.selection.clear()

    # Annotations

    def add_annotation(
        self,
        span: Span | str,
        caption: str | None = None,
        type: str | None = None,
        attributes: dict[str, str] | None = None,
        id: str | None = None
    ) -> Annotation:
        self._check_writable()
        span = parse_span(span) if isinstance(span, str) else span
        self._validate_span(span)
        if id is not None and id in self.annotation_ids:
            raise ValueError(f"Duplicate annotation identifier '{id}'!")

        annotation = Annotation.create(
            span,
            id=id,
            caption=caption,
            type=type or self.config.default_annotation_type,
            attributes=attributes)
        self._annotations.append(annotation)

        logging.debug("Annotation '%s' created: %s." % (annotation.id, annotation))
        self._send('annotation_created', _get_annotation_message(annotation))
        return annotation

    def _set_annotation(self, i: int, annotation: Annotation) -> Annotation:
        self._annotations[i] = annotation
        self._send('annotation_update', _get_annotation_message(annotation))
        return annotation

    def update_annotation(self, annotation_id: str, **changes: Any) -> Annotation:
        """Update any of caption, type, span and attributes of an annotation"""

        self._check_writable()
        i = self._get_index(annotation_id)

        invalid = set(changes) - {'caption', 'type', 'span', 'attributes'}
        if invalid:
            raise ValueError(f"Invalid annotation fields: {', '.join(sorted(invalid))}!")

        if isinstance(changes.get('span'), str):
            changes['span'] = parse_span(changes['span'])
        if 'span' in changes:
            self._validate_span(changes['span'])

        return self._set_annotation(i, self._annotations[i].clone(**changes))

    def delete_annotation(self, annotation_id: str) -> Annotation:
        self._check_writable()
        annotation = self._annotations.pop(self._get_index(annotation_id))
        self._send('annotation_deleted', AnnotationDeletedMessage(annotation_id=annotation.id))
        return annotation

    def merge_annotation_ranges(
        self,
        annotation_id: str,
        index: int,
        direction: MergeDirection
    ) -> Annotation | None:
        """Merge a range of an annotation with its neighbour (None if not applicable)"""

        self._check_writable()
        i = self._get_index(annotation_id)
        merged = merge_ranges(self._annotations[i], index, direction)
        if merged is None:
            logging.debug(
                "Range %d of annotation '%s' cannot be merged %s." %
                (index, annotation_id, direction.value))
            return None
        return self._set_annotation(i, merged)

    def subtract_annotation_from_selection(self, annotation_id: str) -> bool:
        """
        Remove the span of an annotation from the selection

        Returns False, leaving the selection untouched, when the annotation
        does not cover any selected range.
        """

        annotation = self.get_annotation(annotation_id)
        ranges = subtract_from_selection(annotation, self.selection.ranges)
        if ranges is None:
            logging.debug("Annotation '%s' not in the selection." % annotation_id)
            return False
        self.selection.set_ranges(ranges or None)
        return True
