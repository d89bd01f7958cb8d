from pathlib import Path

import pytest

from conftest import make_ppm
from ppm_filter.models.errors import FormatError, ImageIOError
from ppm_filter.models.pixel_grid import Pixel
from ppm_filter.services.image_service import ImageService


@pytest.fixture
def service():
    return ImageService()


def test_load_and_save(service, tmp_path, two_by_one):
    path = tmp_path / "img.ppm"
    service.save_image(two_by_one, path)
    assert path.read_bytes() == make_ppm(2, 1, bytes([10, 20, 30, 40, 50, 60]))
    assert service.load_image(str(path)) == two_by_one


def test_load_directory_is_io_error(service, tmp_path):
    with pytest.raises(ImageIOError) as info:
        service.load_image(tmp_path)
    assert info.value.path == tmp_path


def test_load_format_error_propagates(service, tmp_path):
    path = tmp_path / "bad.ppm"
    path.write_bytes(b"not an image")
    with pytest.raises(FormatError):
        service.load_image(path)


def test_load_with_comment(service, tmp_path):
    path = tmp_path / "c.ppm"
    path.write_bytes(make_ppm(1, 1, b"\x07\x08\x09", comment=b"# GIMP\n"))
    assert service.load_image(path).pixel_at(0, 0) == Pixel(7, 8, 9)


def test_save_failure_removes_partial_file(service, tmp_path, two_by_one, monkeypatch):
    output = tmp_path / "out.ppm"

    def broken_encode(grid, sink):
        sink.write(b"P6\n")
        raise ImageIOError(None, "Cannot write image")

    monkeypatch.setattr(service.codec, "encode", broken_encode)
    with pytest.raises(ImageIOError) as info:
        service.save_image(two_by_one, output)
    assert info.value.path == output
    assert not output.exists()


def test_load_permission_denied(service, tmp_path, monkeypatch):
    path = tmp_path / "locked.ppm"
    path.write_bytes(make_ppm(1, 1, b"\x00\x00\x00"))

    def deny(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "open", deny)
    with pytest.raises(ImageIOError) as info:
        service.load_image(path)
    assert info.value.path == path
    assert isinstance(info.value.__cause__, PermissionError)
