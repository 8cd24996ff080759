"""Tagged region management for idempotent diagram updates."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from ..logging import get_logger

logger = get_logger("markers")


@dataclass
class UpdateResult:
    """Outcome of writing the diagram document."""

    path: Path
    content: str
    changed: bool
    mode: str


class TaggedRegionUpdater:
    """Writes rendered diagrams, replacing only the tagged region when a tag is set."""

    START_FMT = "' DIAGRAM {tag} AUTOGENERATED START TAG\n"
    END_FMT = "' DIAGRAM {tag} AUTOGENERATED END TAG"
    HEADER = "@startuml\n"
    FOOTER = "\n@enduml"

    def markers(self, tag: str) -> Tuple[str, str]:
        return self.START_FMT.format(tag=tag), self.END_FMT.format(tag=tag)

    def merge(self, existing: str, body: str, tag: Optional[str]) -> Tuple[str, str]:
        """Return `(new_document, mode)` for the given existing document text."""
        if not tag:
            return f"{self.HEADER}{body}{self.FOOTER}", "overwrite"

        start, end = self.markers(tag)
        document = existing.replace("\r\n", "\n")
        region = f"{start}{body}{end}"

        replaced, count = self._replace_regions(document, start, end, region)
        if count:
            return replaced, "replace"

        if document:
            logger.warning(
                "Tags not found in document; appending a new tagged block (%s / %s)",
                start.strip(),
                end,
            )
            return f"{document}\n\n{self.HEADER}{region}{self.FOOTER}", "append"
        return f"{self.HEADER}{region}{self.FOOTER}", "create"

    @staticmethod
    def _replace_regions(document: str, start: str, end: str, region: str) -> Tuple[str, int]:
        """Replace every complete start..end region, shortest match first."""
        parts: List[str] = []
        count = 0
        rest = document
        while start in rest:
            pre, after = rest.split(start, 1)
            if end not in after:
                break
            _, rest = after.split(end, 1)
            parts.append(pre + region)
            count += 1
        parts.append(rest)
        return "".join(parts), count

    def write(self, path: Path, body: str, tag: Optional[str] = None) -> UpdateResult:
        """Merge `body` into the document at `path`. I/O errors propagate."""
        existing = ""
        try:
            existing = path.read_bytes().decode("utf-8")
        except FileNotFoundError:
            logger.debug("No existing document at %s; writing a new one", path)
        except UnicodeDecodeError as exc:
            if tag:
                raise OSError(f"Existing document {path} is not valid UTF-8: {exc}") from exc
            logger.debug("Overwriting non UTF-8 document at %s", path)

        content, mode = self.merge(existing, body, tag)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        logger.info("Diagram saved to %s (%s)", path, mode)
        return UpdateResult(path=path, content=content, changed=content != existing, mode=mode)


__all__ = ["TaggedRegionUpdater", "UpdateResult"]
