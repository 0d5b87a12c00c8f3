import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest
import yaml

from surfdist.scripts.compute_surface_distance import main, run
from surfdist.utils.config import DEFAULTS, load_config
from surfdist.utils.io import load_array


def write_line_graph(tmp_path, N=6):
    """Positions / edges CSVs for a unit-spaced line, 1-based edges."""
    positions = np.stack([np.arange(N, dtype=float), np.zeros(N)], axis=1)
    edges = np.array([[i, i + 1] for i in range(1, N)])
    pos_path = tmp_path / "positions.csv"
    face_path = tmp_path / "faces.csv"
    np.savetxt(pos_path, positions, delimiter=",")
    np.savetxt(face_path, edges, delimiter=",", fmt="%d")
    return pos_path, face_path


class TestLoadArray:
    def test_formats(self, tmp_path):
        arr = np.arange(6, dtype=float).reshape(3, 2)
        np.save(tmp_path / "a.npy", arr)
        np.savetxt(tmp_path / "a.csv", arr, delimiter=",")
        np.savetxt(tmp_path / "a.txt", arr)
        for name in ("a.npy", "a.csv", "a.txt"):
            np.testing.assert_allclose(load_array(tmp_path / name), arr)

    def test_single_row_stays_2d(self, tmp_path):
        np.savetxt(tmp_path / "f.csv", np.array([[1, 2, 3]]), delimiter=",", fmt="%d")
        assert load_array(tmp_path / "f.csv").shape == (1, 3)

    def test_missing_and_unsupported(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_array(tmp_path / "nope.npy")
        (tmp_path / "mesh.obj").write_text("v 0 0 0\n")
        with pytest.raises(ValueError):
            load_array(tmp_path / "mesh.obj")


class TestConfig:
    def test_defaults(self):
        cfg = load_config()
        assert cfg == DEFAULTS
        cfg["search"]["start_node"] = 99
        assert DEFAULTS["search"]["start_node"] == 1  # defaults not mutated

    def test_partial_file_merged(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(yaml.dump({"search": {"max_search_distance": 2.5}}))
        cfg = load_config(path)
        assert cfg["search"]["max_search_distance"] == 2.5
        assert cfg["search"]["start_node"] == 1
        assert cfg["output"]["plot"] is False

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(path)


def test_run_writes_artifacts(tmp_path):
    pos_path, face_path = write_line_graph(tmp_path)
    cfg = load_config()
    cfg["data"] = {"positions": str(pos_path), "faces": str(face_path)}
    cfg["output"] = {"dir": str(tmp_path / "out"), "target_node": 6, "plot": False}

    out_dir = run(cfg)
    distances = pd.read_csv(out_dir / "distances.csv")
    np.testing.assert_allclose(distances["distance"], [0, 1, 2, 3, 4, 5])
    path = pd.read_csv(out_dir / "path.csv")
    assert path["path"].tolist() == [1, 2, 3, 4, 5, 6]
    with open(out_dir / "meta.yaml") as f:
        meta = yaml.safe_load(f)
    assert meta["n_nodes"] == 6 and meta["face_index_start"] == 1


def test_main_with_config_and_overrides(tmp_path):
    pos_path, face_path = write_line_graph(tmp_path)
    cfg_path = tmp_path / "run.yaml"
    cfg_path.write_text(yaml.dump({
        "data": {"positions": str(pos_path), "faces": str(face_path)},
        "output": {"dir": str(tmp_path / "out"), "target_node": None},
    }))
    code = main(["--config", str(cfg_path), "--max_search_distance", "2", "--target_node", "3", "--plot"])
    assert code == 0
    distances = pd.read_csv(tmp_path / "out" / "distances.csv")
    assert distances["distance"].isna().sum() == 3
    assert (tmp_path / "out" / "path.csv").exists()
    assert (tmp_path / "out" / "path.png").exists()
    assert plt.get_fignums() == []


def test_main_reports_errors(tmp_path, capsys):
    pos_path, face_path = write_line_graph(tmp_path)
    code = main(["--positions", str(pos_path), "--faces", str(face_path),
                 "--start_node", "42", "--out_dir", str(tmp_path / "out")])
    assert code == 1
    assert "ERROR" in capsys.readouterr().out

    code = main(["--positions", str(tmp_path / "missing.csv"), "--faces", str(face_path)])
    assert code == 1

    code = main(["--config", str(tmp_path / "missing.yaml")])
    assert code == 1
    bad_cfg = tmp_path / "list.yaml"
    bad_cfg.write_text("- 1\n- 2\n")
    code = main(["--config", str(bad_cfg)])
    assert code == 1
    assert capsys.readouterr().out.count("ERROR") == 3


def test_unreachable_target_keeps_distances(tmp_path, capsys):
    """Two separate lines 1-2-3 and 4-5-6; node 4 cannot be reached from node 1."""
    positions = np.stack([np.arange(6, dtype=float), np.zeros(6)], axis=1)
    pos_path, face_path = tmp_path / "positions.csv", tmp_path / "faces.csv"
    np.savetxt(pos_path, positions, delimiter=",")
    np.savetxt(face_path, np.array([[1, 2], [2, 3], [4, 5], [5, 6]]), delimiter=",", fmt="%d")
    out_dir = tmp_path / "out"

    code = main(["--positions", str(pos_path), "--faces", str(face_path),
                 "--target_node", "4", "--out_dir", str(out_dir)])
    assert code == 1
    assert "Node 4 is not reachable from [1]" in capsys.readouterr().out
    distances = pd.read_csv(out_dir / "distances.csv")
    np.testing.assert_allclose(distances["distance"][:3], [0, 1, 2])
    assert distances["distance"][3:].isna().all()
    assert (out_dir / "meta.yaml").exists()
    assert not (out_dir / "path.csv").exists()
