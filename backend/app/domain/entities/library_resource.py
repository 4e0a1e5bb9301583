"""Domain entity for library resources — the uploaded documents that get chunked."""

from dataclasses import dataclass


@dataclass
class LibraryResource:
    """A document in a user's library, with its extracted text.

    The extracted text may carry ``[PAGE n]`` markers inserted by the PDF
    extraction step; the chunker uses them to recover page numbers.
    """

    id: str
    title: str
    user_id: str
    author: str = ""
    text_content: str | None = None

    @property
    def display_author(self) -> str:
        return self.author or "Desconocido"
