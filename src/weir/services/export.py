"""ExportService — JSON snapshots of a graph.

A snapshot keeps vertex ids and the next-id counter, so a graph that is
saved and loaded again allocates the same ids it would have allocated
without the round trip.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from weir.domain.errors import WeirError
from weir.infrastructure.graph.store import Weir
from weir.services.base import BaseService
from weir.services.contracts import (
    EdgeRecord,
    GraphDocument,
    VertexRecord,
    decode_attrs,
    encode_attrs,
)
from weir.services.result import ServiceResult
from weir.services.telemetry import traced

logger = logging.getLogger(__name__)


class ExportService(BaseService):
    """Serialize a graph to (and rebuild it from) a JSON document."""

    def to_document(self) -> GraphDocument:
        w = self._weir
        vertices = [
            VertexRecord(
                id=v,
                position=w.position(v).to_list(),
                attrs=encode_attrs(w.vertex_attrs(v)),
            )
            for v in w.vertex_ids()
        ]
        edges = [
            EdgeRecord(a=e.a, b=e.b, attrs=encode_attrs(w.edge_attrs(e.a, e.b)))
            for e in w.edges()
        ]
        return GraphDocument(
            dim=w.dim,
            next_index=w.next_index,
            vertices=vertices,
            edges=edges,
        )

    @traced
    def export_json(self, path: Path, *, indent: int | None = 2) -> ServiceResult:
        """Write the graph to *path* as JSON, creating parent directories."""
        doc = self.to_document()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(doc.model_dump_json(indent=indent) + "\n", encoding="utf-8")
        except OSError as exc:
            return ServiceResult.fail(
                "export_json", "IO_ERROR", f"Cannot write {path}: {exc}", path=str(path)
            )
        logger.debug("Wrote %s (%d vertices)", path, len(doc.vertices))
        return ServiceResult(
            ok=True,
            op="export_json",
            data={
                "path": str(path),
                "vertices": len(doc.vertices),
                "edges": len(doc.edges),
            },
        )

    @staticmethod
    def from_document(doc: GraphDocument) -> Weir:
        """Rebuild a graph from a validated document.

        Raises:
            ValueError: repeated ids or an inconsistent ``next_index``.
            WeirError: an edge that cannot be formed.
        """
        return Weir.from_records(
            doc.dim,
            ((r.id, r.position, decode_attrs(r.attrs)) for r in doc.vertices),
            ((r.a, r.b, decode_attrs(r.attrs)) for r in doc.edges),
            next_index=doc.next_index,
        )

    @staticmethod
    def load_json(path: Path) -> Weir:
        """Read a snapshot written by :meth:`export_json`.

        Raises:
            OSError: the file cannot be read.
            pydantic.ValidationError: the document shape is wrong.
            ValueError / WeirError: the content is inconsistent.
        """
        text = path.read_text(encoding="utf-8")
        doc = GraphDocument.model_validate_json(text)
        return ExportService.from_document(doc)

    @classmethod
    def try_load_json(cls, path: Path) -> tuple[Weir | None, ServiceResult | None]:
        """Like :meth:`load_json`, but report failures as a ServiceResult."""
        try:
            return cls.load_json(path), None
        except OSError as exc:
            return None, ServiceResult.fail(
                "load_json", "IO_ERROR", f"Cannot read {path}: {exc}", path=str(path)
            )
        except ValidationError as exc:
            return None, ServiceResult.fail(
                "load_json",
                "INVALID_INPUT",
                f"{path} is not a weir snapshot",
                path=str(path),
                errors=exc.error_count(),
            )
        except (WeirError, ValueError) as exc:
            return None, ServiceResult.fail(
                "load_json", "INVALID_INPUT", f"{path}: {exc}", path=str(path)
            )
