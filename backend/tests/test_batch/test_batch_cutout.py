"""Tests for the folder batch driver."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np

import batch_cutout
from stickerlab.engine.config import IsolationConfig
from stickerlab.utils.imaging import load_image, save_png
from tests.conftest import make_cutout, make_instance_mask, make_photo


def test_find_images_excludes_masks(tmp_path):
    for name in ("a.png", "a.mask.png", "b.jpg", "notes.txt"):
        (tmp_path / name).write_bytes(b"")
    found = [p.name for p in batch_cutout.find_images(tmp_path, ".mask.png")]
    assert found == ["a.png", "b.jpg"]


def test_opaque_image_without_mask_skipped(tmp_path):
    save_png(make_photo(10, 10), tmp_path / "plain.png")
    assert batch_cutout.build_context(tmp_path / "plain.png", ".mask.png") is None


def test_folder_run_writes_outputs(tmp_path, capsys):
    src = tmp_path / "in"
    out = tmp_path / "out"
    src.mkdir()
    save_png(make_photo(120, 160), src / "scene.png")
    save_png(
        make_instance_mask(120, 160, {1: (50, 40, 110, 80), 2: (0, 0, 30, 20)}),
        src / "scene.mask.png",
    )
    save_png(make_cutout(), src / "sticker.png")

    code = batch_cutout.main([str(src), "-o", str(out), "--workers", "1", "--size", "128"])

    assert code == 0
    assert "Processed 2/2" in capsys.readouterr().out
    for stem in ("scene", "sticker"):
        assert load_image(out / f"{stem}.png").shape == (128, 128, 4)
        assert (out / f"{stem}.cutout.png").exists()
        assert (out / f"{stem}.outline.png").exists()
        svg = (out / f"{stem}.svg").read_text()
        assert "<path d=\"M" in svg
    assert load_image(out / "scene.cutout.png").shape == (40, 60, 4)


def test_missing_folder(tmp_path):
    assert batch_cutout.main([str(tmp_path / "nope"), "-o", str(tmp_path / "out")]) == 1


def test_no_outline_flag(tmp_path):
    src = tmp_path / "in"
    src.mkdir()
    save_png(make_cutout(), src / "only.png")
    code = batch_cutout.main([str(src), "-o", str(tmp_path / "out"), "--no-outline"])
    assert code == 0
    assert not (tmp_path / "out" / "only.outline.png").exists()
    assert np.any(load_image(tmp_path / "out" / "only.png")[:, :, 3])


def test_process_image_returns_summary_only(tmp_path):
    save_png(make_cutout(), tmp_path / "one.png")
    out = tmp_path / "out"
    out.mkdir()
    result = batch_cutout.process_image(tmp_path / "one.png", out, ".mask.png", IsolationConfig())
    assert result == {
        "name": "one.png",
        "status": "ok",
        "files": ["one.png", "one.cutout.png", "one.outline.png", "one.svg"],
    }


def test_process_image_reports_undecodable_file(tmp_path):
    (tmp_path / "broken.png").write_bytes(b"not a png")
    result = batch_cutout.process_image(tmp_path / "broken.png", tmp_path, ".mask.png", IsolationConfig())
    assert result["status"] == "error"
    assert result["files"] == []


def test_images_are_decoded_one_at_a_time(tmp_path, monkeypatch):
    src = tmp_path / "in"
    src.mkdir()
    for name in ("a.png", "b.png", "c.png"):
        save_png(make_cutout(), src / name)

    events: list[str] = []
    real_build = batch_cutout.build_context
    real_write = batch_cutout.write_outputs

    def counting_build(path, mask_suffix):
        events.append("build")
        return real_build(path, mask_suffix)

    def counting_write(ctx, stem, out_dir):
        events.append("write")
        return real_write(ctx, stem, out_dir)

    monkeypatch.setattr(batch_cutout, "build_context", counting_build)
    monkeypatch.setattr(batch_cutout, "write_outputs", counting_write)
    monkeypatch.setattr(batch_cutout, "ProcessPoolExecutor", ThreadPoolExecutor)

    code = batch_cutout.main([str(src), "-o", str(tmp_path / "out"), "--workers", "1"])

    assert code == 0
    # Each image is written before the next one is decoded
    assert events == ["build", "write"] * 3
