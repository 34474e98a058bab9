from unittest.mock import AsyncMock

import pytest

from media_pipeline.media.exceptions import DispatchError
from media_pipeline.media.models import MediaFile, UploadCallbacks, UploadOutcome
from media_pipeline.upload.base import BaseUploadService
from media_pipeline.upload.dispatcher import UploadDispatcher

_ENDPOINT = "https://media.example.com/upload"


def _make_dispatcher() -> tuple[UploadDispatcher, AsyncMock]:
    service = AsyncMock(spec=BaseUploadService)
    return UploadDispatcher(service), service


def _make_file(name: str) -> MediaFile:
    return MediaFile.from_bytes(name, b"data", "image/png")


class TestUploadForms:
    @pytest.mark.asyncio
    async def test_empty_batch_skips_service(self) -> None:
        dispatcher, service = _make_dispatcher()

        assert await dispatcher.upload([], _ENDPOINT) == []
        service.upload_one.assert_not_called()
        service.upload_many.assert_not_called()

    @pytest.mark.asyncio
    async def test_single_file_uses_upload_one(self) -> None:
        dispatcher, service = _make_dispatcher()
        outcome = UploadOutcome(success=True, url="https://x/a.png")
        service.upload_one.return_value = outcome
        callbacks = UploadCallbacks()
        file = _make_file("a.png")

        result = await dispatcher.upload([file], _ENDPOINT, callbacks, [{"caption": "a.png"}])

        assert result == [outcome]
        service.upload_one.assert_awaited_once_with(file, _ENDPOINT, callbacks, {"caption": "a.png"})

    @pytest.mark.asyncio
    async def test_many_files_use_upload_many(self) -> None:
        dispatcher, service = _make_dispatcher()
        outcomes = [UploadOutcome(success=True, url="u1"), UploadOutcome(success=False)]
        service.upload_many.return_value = outcomes
        files = [_make_file("a.png"), _make_file("b.png")]
        metadata = [{"caption": "a.png"}, {"caption": "b.png"}]

        result = await dispatcher.upload(files, _ENDPOINT, None, metadata)

        assert result == outcomes
        service.upload_many.assert_awaited_once_with(files, _ENDPOINT, None, metadata)
        service.upload_one.assert_not_called()


class TestUploadFailures:
    @pytest.mark.asyncio
    async def test_single_upload_error_becomes_dispatch_error(self) -> None:
        dispatcher, service = _make_dispatcher()
        service.upload_one.side_effect = ConnectionError("network down")

        with pytest.raises(DispatchError, match="network down") as exc_info:
            await dispatcher.upload([_make_file("a.png")], _ENDPOINT)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_batch_upload_error_becomes_dispatch_error(self) -> None:
        dispatcher, service = _make_dispatcher()
        service.upload_many.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(DispatchError, match="quota exceeded"):
            await dispatcher.upload([_make_file("a.png"), _make_file("b.png")], _ENDPOINT)
