"""Repository contents resource client."""

import base64
import binascii
from typing import TYPE_CHECKING
from urllib.parse import quote

from pullmaster.exceptions import NotFoundError, UnknownError
from pullmaster.types.pulls import PullRequestRef

if TYPE_CHECKING:
    from pullmaster.transport import AsyncHTTPTransport


class ContentsClient:
    """Client for reading file content at a given ref."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def get(
        self, ref: PullRequestRef, path: str, git_ref: str
    ) -> str | None:
        """
        Get the text content of a file at a commit SHA or branch.

        Args:
            ref: The pull request whose repository is read
            path: File path relative to the repository root
            git_ref: Commit SHA or branch name

        Returns:
            Decoded file content, or None when the file does not exist at git_ref

        Raises:
            PullmasterError: On any failure other than the file being absent
        """
        api_path = f"/repos/{ref.owner}/{ref.repo_name}/contents/{quote(path)}"
        params = {"ref": git_ref}

        try:
            data = await self.transport.get_json(api_path, params=params)
        except NotFoundError:
            return None

        if not isinstance(data, dict) or data.get("type", "file") != "file":
            raise UnknownError(
                "NOT_A_FILE", f"{path} at {git_ref} is not a regular file"
            )

        # Files over 1 MB come back without inline content
        if data.get("encoding") != "base64" or not data.get("content"):
            if data.get("size", 0) == 0:
                return ""
            return await self.transport.get_text(api_path, params=params)

        try:
            raw = base64.b64decode(data["content"])
        except (binascii.Error, ValueError) as e:
            raise UnknownError(
                "INVALID_CONTENT", f"Undecodable content for {path} at {git_ref}"
            ) from e
        return raw.decode("utf-8", errors="replace")
