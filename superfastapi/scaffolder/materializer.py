"""Write a manifest to disk.

The materializer refuses to touch an existing path, then creates the project
root, every directory, and every rendered file in manifest order.  Entries are
applied one at a time; each blocking filesystem call runs in a worker thread so
an embedding event loop stays responsive.

By default a failure part-way through leaves the already-written entries on
disk.  With ``atomic=True`` the tree is built in a hidden sibling directory and
renamed into place only once every entry has been written.
"""

from __future__ import annotations

import asyncio
import errno
import shutil
import stat
import uuid
from collections.abc import Callable
from pathlib import Path

from .errors import DirectoryExistsError, FilesystemError, TemplateNotFoundError
from .manifest import Manifest, ManifestEntry
from .templates import TemplateRenderer

EntryCallback = Callable[[ManifestEntry], None]


async def materialize(
    root: str | Path,
    manifest: Manifest,
    renderer: TemplateRenderer,
    *,
    atomic: bool = False,
    on_entry: EntryCallback | None = None,
) -> Path:
    """Create the project tree described by *manifest* under *root*.

    Args:
        root: Project root to create.  Must not exist yet.
        manifest: Ordered entries from ``build_manifest``.
        renderer: Renderer used for every file entry.
        atomic: Stage into a sibling directory and rename on success.
        on_entry: Called with each entry after it has been applied.

    Returns:
        The project root path.

    Raises:
        DirectoryExistsError: If *root* already exists.
        MissingVariableError / TemplateNotFoundError: From rendering.
        FilesystemError: Wrapping any ``OSError`` from the filesystem.
    """
    root = Path(root)
    if await asyncio.to_thread(_path_exists, root):
        raise DirectoryExistsError(root.name)

    if not atomic:
        await _create_root(root)
        await _apply_entries(root, manifest, renderer, on_entry)
        return root

    staging = root.with_name(f".{root.name}.{uuid.uuid4().hex[:8]}.partial")
    await _create_root(staging)
    try:
        await _apply_entries(staging, manifest, renderer, on_entry)
        if await asyncio.to_thread(_path_exists, root):
            raise DirectoryExistsError(root.name)
        await _move_into_place(staging, root)
    except BaseException:
        await asyncio.to_thread(shutil.rmtree, staging, ignore_errors=True)
        raise
    return root


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


async def _create_root(root: Path) -> None:
    try:
        await asyncio.to_thread(root.mkdir, parents=True, exist_ok=False)
    except FileExistsError as exc:
        raise DirectoryExistsError(root.name) from exc
    except OSError as exc:
        raise FilesystemError(f"Cannot create {root}: {exc}") from exc


async def _apply_entries(
    base: Path,
    manifest: Manifest,
    renderer: TemplateRenderer,
    on_entry: EntryCallback | None,
) -> None:
    for entry in manifest:
        target = base / entry.path
        if entry.is_directory:
            await _run_fs(target.mkdir, exist_ok=True)
        else:
            if entry.template is None:
                raise TemplateNotFoundError(f"No template given for file entry: {entry.path}")
            content = renderer.render(entry.template, entry.variables)
            await _run_fs(_write_file, target, content, entry.executable)
        if on_entry is not None:
            on_entry(entry)


async def _run_fs(func: Callable[..., object], *args: object, **kwargs: object) -> None:
    """Run a blocking filesystem call in a thread, wrapping ``OSError``."""
    try:
        await asyncio.to_thread(func, *args, **kwargs)
    except OSError as exc:
        raise FilesystemError(str(exc)) from exc


async def _move_into_place(staging: Path, root: Path) -> None:
    try:
        await asyncio.to_thread(staging.rename, root)
    except OSError as exc:
        if exc.errno in (errno.EEXIST, errno.ENOTEMPTY, errno.ENOTDIR):
            raise DirectoryExistsError(root.name) from exc
        raise FilesystemError(str(exc)) from exc


def _path_exists(path: Path) -> bool:
    return path.exists() or path.is_symlink()


def _write_file(path: Path, content: str, executable: bool) -> None:
    """Synchronous helper: write content, optionally marking it executable."""
    path.write_text(content, encoding="utf-8")
    if executable:
        current = path.stat().st_mode
        path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
