from modelstore.main import get_parser, main


def test_parser_accepts_backend_override():
    args = get_parser().parse_args(["--backend", "key_value", "--data-dir", "x"])
    assert args.backend == "key_value" and args.data_dir == "x"


def test_demo_runs_against_each_backend(tmp_path):
    for backend in ("memory", "key_value", "transactional"):
        assert main(["--config", str(tmp_path / "none.yml"), "--backend", backend,
                     "--data-dir", str(tmp_path / backend)]) == 0
    assert (tmp_path / "transactional" / "modelstore.db").exists()
    assert (tmp_path / "key_value" / "modelstore.json").exists()
