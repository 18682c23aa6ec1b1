# ruff: noqa: S101

"""Tests for the ingestion orchestrator."""

import asyncio
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import cast
from uuid import UUID

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.common.exceptions import InvalidFileError
from dlama.config import settings
from dlama.datapoint.models import ImageDataPoint, TextDataPoint
from dlama.ingestion import (
    EmptyDatasetError,
    MalformedInputError,
    PersistenceError,
    StorageError,
    UnsupportedFormatError,
    UploadedFile,
    ingest_dataset,
)
from dlama.project.data_type import ProjectDataType
from tests.utils import PNG_BYTES, ProjectFactory, make_upload, make_zip


async def _text_rows(db: AsyncSession, project_id: UUID) -> list[TextDataPoint]:
    stmt = (
        select(TextDataPoint)
        .where(TextDataPoint.project_id == project_id)
        .order_by(TextDataPoint.data_point_index)
    )
    return list((await db.exec(stmt)).all())


async def _image_rows(db: AsyncSession, project_id: UUID) -> list[ImageDataPoint]:
    stmt = (
        select(ImageDataPoint)
        .where(ImageDataPoint.project_id == project_id)
        .order_by(ImageDataPoint.data_point_index)
    )
    return list((await db.exec(stmt)).all())


def _stored_files(storage_path: str | None) -> list[str]:
    return sorted(p.name for p in Path(cast(str, storage_path)).iterdir())


@pytest.mark.asyncio
@pytest.mark.ingestion
class TestIngestText:
    """Tests for text ingestion."""

    @staticmethod
    async def test_records_get_contiguous_indices(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """k usable records become data points 0..k-1 in source order."""
        project = await make_project()

        result = await ingest_dataset(
            session, project, make_upload("lines.txt", "alpha\n\nbeta\n  gamma \n")
        )

        assert (result.created, result.first_index, result.last_index) == (3, 0, 2)
        rows = await _text_rows(session, project.id)
        assert [(r.data_point_index, r.content) for r in rows] == [
            (0, "alpha"),
            (1, "beta"),
            (2, "gamma"),
        ]
        assert all(r.version == 1 for r in rows)
        assert all(r.created_at is not None for r in rows)

    @staticmethod
    async def test_json_blank_strings_are_skipped(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """Blank JSON strings leave no gap in the index sequence."""
        project = await make_project()

        await ingest_dataset(
            session,
            project,
            make_upload("array.json", '["", "hello", "", "world", ""]'),
        )

        rows = await _text_rows(session, project.id)
        assert [(r.data_point_index, r.content) for r in rows] == [
            (0, "hello"),
            (1, "world"),
        ]

    @staticmethod
    async def test_ingesting_twice_appends(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """The same file ingested twice is appended with shifted indices."""
        project = await make_project()
        upload = make_upload("table.csv", "a,b\nc\n")

        first = await ingest_dataset(session, project, upload)
        second = await ingest_dataset(session, project, upload)

        assert (first.first_index, first.last_index) == (0, 2)
        assert (second.first_index, second.last_index) == (3, 5)
        rows = await _text_rows(session, project.id)
        assert [r.content for r in rows] == ["a", "b", "c", "a", "b", "c"]

    @staticmethod
    async def test_continues_after_existing_maximum(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """A project holding index m continues at m + 1."""
        project = await make_project()
        session.add(
            TextDataPoint(project_id=project.id, data_point_index=41, content="x")
        )
        await session.commit()

        result = await ingest_dataset(session, project, make_upload("a.txt", "y"))

        assert (result.first_index, result.last_index) == (42, 42)

    @pytest.mark.edge_cases
    @pytest.mark.parametrize("file_name", ["sheet.xlsx", "photo.png", "images.zip"])
    @staticmethod
    async def test_unsupported_format_persists_nothing(
        session: AsyncSession, make_project: ProjectFactory, file_name: str
    ) -> None:
        """Unknown extensions and image files are rejected for text projects."""
        project = await make_project()

        with pytest.raises(UnsupportedFormatError):
            await ingest_dataset(session, project, make_upload(file_name, "a\nb"))

        assert await _text_rows(session, project.id) == []

    @pytest.mark.edge_cases
    @staticmethod
    async def test_empty_file(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """A zero-length file is an empty dataset."""
        project = await make_project()

        with pytest.raises(EmptyDatasetError):
            await ingest_dataset(session, project, make_upload("a.txt", b""))

    @pytest.mark.edge_cases
    @staticmethod
    async def test_missing_file(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """Ingestion without a file is rejected."""
        project = await make_project()

        with pytest.raises(InvalidFileError):
            await ingest_dataset(session, project, None)

    @pytest.mark.edge_cases
    @staticmethod
    async def test_malformed_file_reports_parse_error(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """A parse failure inside the project lock surfaces as itself."""
        project = await make_project()
        project_id = project.id

        with pytest.raises(MalformedInputError, match="not valid JSON"):
            await ingest_dataset(session, project, make_upload("a.json", "[1, 2"))

        assert await _text_rows(session, project_id) == []

    @pytest.mark.edge_cases
    @staticmethod
    async def test_blank_file_reports_empty_dataset(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """A file without usable records is an empty dataset, not a crash."""
        project = await make_project()

        with pytest.raises(EmptyDatasetError):
            await ingest_dataset(session, project, make_upload("a.txt", "\n  \n"))

    @staticmethod
    async def test_concurrent_uploads_get_unique_indices(
        session: AsyncSession,
        make_project: ProjectFactory,
        session_factory: Callable[[], AsyncSession],
    ) -> None:
        """Parallel uploads into one project never share an index."""
        project = await make_project()
        uploads = [
            make_upload(f"part{i}.txt", "\n".join(f"{i}-{j}" for j in range(5)))
            for i in range(4)
        ]

        async def _ingest(upload: UploadedFile) -> None:
            async with session_factory() as db:
                await ingest_dataset(db, project, upload)

        await asyncio.gather(*(_ingest(upload) for upload in uploads))

        rows = await _text_rows(session, project.id)
        assert [r.data_point_index for r in rows] == list(range(20))
        for i in range(4):
            indices = [
                r.data_point_index for r in rows if r.content.startswith(f"{i}-")
            ]
            assert indices == list(range(indices[0], indices[0] + 5))


@pytest.mark.asyncio
@pytest.mark.ingestion
class TestIngestImages:
    """Tests for image ingestion and its rollback."""

    @staticmethod
    async def test_archive_images_are_stored(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """N images of an archive become N data points with stored files."""
        project = await make_project(ProjectDataType.IMAGE)
        archive = make_zip({
            "a.png": PNG_BYTES,
            "readme.md": b"# skip",
            "b.png": PNG_BYTES,
            "c.png": PNG_BYTES,
        })

        result = await ingest_dataset(
            session, project, make_upload("images.zip", archive)
        )

        assert (result.created, result.first_index, result.last_index) == (3, 0, 2)
        rows = await _image_rows(session, project.id)
        assert [Path(r.path).name for r in rows] == [
            "image_0.png",
            "image_1.png",
            "image_2.png",
        ]
        assert all(Path(r.path).read_bytes() == PNG_BYTES for r in rows)
        assert list(settings.staging_dir.iterdir()) == []

    @staticmethod
    async def test_single_image_after_archive(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """A single image continues the index sequence of earlier uploads."""
        project = await make_project(ProjectDataType.IMAGE)
        archive = make_zip({"a.png": PNG_BYTES, "b.png": PNG_BYTES})
        await ingest_dataset(session, project, make_upload("images.zip", archive))

        result = await ingest_dataset(session, project, make_upload("c.PNG", PNG_BYTES))

        assert result.first_index == 2
        assert _stored_files(project.storage_path) == [
            "image_0.png",
            "image_1.png",
            "image_2.png",
        ]

    @pytest.mark.edge_cases
    @staticmethod
    async def test_text_file_is_rejected(
        session: AsyncSession, make_project: ProjectFactory
    ) -> None:
        """Text formats are not accepted by image projects."""
        project = await make_project(ProjectDataType.IMAGE)

        with pytest.raises(UnsupportedFormatError):
            await ingest_dataset(session, project, make_upload("a.txt", "text"))

        assert _stored_files(project.storage_path) == []

    @pytest.mark.edge_cases
    @staticmethod
    async def test_failed_move_rolls_back(
        session: AsyncSession,
        make_project: ProjectFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A move failing after earlier moves leaves no rows and no files."""
        project = await make_project(ProjectDataType.IMAGE)
        project_id, storage_path = project.id, project.storage_path
        archive = make_zip({f"{i}.png": PNG_BYTES for i in range(5)})
        real_move = shutil.move
        calls = 0

        def _failing_move(src: Path, dst: Path) -> object:
            nonlocal calls
            calls += 1
            if calls == 3:
                raise OSError("disk full")
            return real_move(src, dst)

        monkeypatch.setattr("dlama.ingestion.staging.shutil.move", _failing_move)

        with pytest.raises(StorageError):
            await ingest_dataset(session, project, make_upload("images.zip", archive))

        assert await _image_rows(session, project_id) == []
        assert _stored_files(storage_path) == []
        assert list(settings.staging_dir.iterdir()) == []

    @pytest.mark.edge_cases
    @staticmethod
    async def test_failed_commit_removes_files(
        session: AsyncSession,
        make_project: ProjectFactory,
        session_factory: Callable[[], AsyncSession],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A commit failing after promotion deletes the promoted files."""
        project = await make_project(ProjectDataType.IMAGE)
        project_id, storage_path = project.id, project.storage_path
        archive = make_zip({"a.png": PNG_BYTES, "b.png": PNG_BYTES})

        async def _failing_commit() -> None:
            raise OperationalError("COMMIT", {}, Exception("database is locked"))

        monkeypatch.setattr(session, "commit", _failing_commit)

        with pytest.raises(PersistenceError):
            await ingest_dataset(session, project, make_upload("images.zip", archive))

        assert _stored_files(storage_path) == []
        async with session_factory() as db:
            assert await _image_rows(db, project_id) == []

    @pytest.mark.edge_cases
    @staticmethod
    async def test_cancellation_rolls_back(
        session: AsyncSession,
        make_project: ProjectFactory,
        session_factory: Callable[[], AsyncSession],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Cancellation before the commit leaves no rows and no files."""
        project = await make_project(ProjectDataType.IMAGE)
        project_id, storage_path = project.id, project.storage_path
        archive = make_zip({"a.png": PNG_BYTES, "b.png": PNG_BYTES})

        async def _cancelled_commit(_db: AsyncSession) -> None:
            raise asyncio.CancelledError

        monkeypatch.setattr("dlama.ingestion.orchestrator._commit", _cancelled_commit)

        with pytest.raises(asyncio.CancelledError):
            await ingest_dataset(session, project, make_upload("images.zip", archive))

        assert _stored_files(storage_path) == []
        async with session_factory() as db:
            assert await _image_rows(db, project_id) == []

    @pytest.mark.edge_cases
    @staticmethod
    async def test_cancellation_after_commit_keeps_files(
        session: AsyncSession,
        make_project: ProjectFactory,
        session_factory: Callable[[], AsyncSession],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A cancellation arriving once the commit went through keeps the files."""
        project = await make_project(ProjectDataType.IMAGE)
        project_id, storage_path = project.id, project.storage_path
        archive = make_zip({"a.png": PNG_BYTES, "b.png": PNG_BYTES})

        async def _commit_then_cancel(db: AsyncSession) -> None:
            await db.commit()
            raise asyncio.CancelledError

        monkeypatch.setattr("dlama.ingestion.orchestrator._commit", _commit_then_cancel)

        with pytest.raises(asyncio.CancelledError):
            await ingest_dataset(session, project, make_upload("images.zip", archive))

        assert _stored_files(storage_path) == ["image_0.png", "image_1.png"]
        async with session_factory() as db:
            rows = await _image_rows(db, project_id)
        assert [Path(r.path).name for r in rows] == ["image_0.png", "image_1.png"]
        assert all(Path(r.path).is_file() for r in rows)
        assert list(settings.staging_dir.iterdir()) == []

    @pytest.mark.edge_cases
    @staticmethod
    async def test_commit_finishes_when_cancelled(
        session: AsyncSession,
        make_project: ProjectFactory,
        session_factory: Callable[[], AsyncSession],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Cancelling the task during a slow commit still stores rows and files."""
        project = await make_project(ProjectDataType.IMAGE)
        project_id, storage_path = project.id, project.storage_path
        archive = make_zip({"a.png": PNG_BYTES})
        commit_started = asyncio.Event()
        real_commit = session.commit

        async def _slow_commit() -> None:
            commit_started.set()
            await asyncio.sleep(0.05)
            await real_commit()

        monkeypatch.setattr(session, "commit", _slow_commit)

        task = asyncio.create_task(
            ingest_dataset(session, project, make_upload("images.zip", archive))
        )
        await commit_started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert _stored_files(storage_path) == ["image_0.png"]
        async with session_factory() as db:
            assert len(await _image_rows(db, project_id)) == 1
