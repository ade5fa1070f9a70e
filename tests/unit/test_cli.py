from __future__ import annotations

import json

import pytest

POOL = {
    "jobs": [
        {
            "job_id": "job-backend",
            "title": "Backend Engineer",
            "tech_stack": ["Java", "Spring"],
            "required_years": 2,
        },
        {
            "job_id": "job-frontend",
            "title": "Frontend Developer",
            "tech_stack": ["JavaScript", "React"],
            "required_years": 1,
        },
    ],
    "candidates": [
        {
            "candidate_id": "cand-ana",
            "name": "Ana",
            "skills": [
                {"name": "Java", "proficiency_level": 8},
                {"name": "Spring", "proficiency_level": 7},
            ],
            "experience": [
                {
                    "position": "Backend Engineer",
                    "start_date": "2018-01-01",
                    "end_date": "2023-01-01",
                }
            ],
            "education": [{"degree": "BSc Computer Science"}],
        },
        {
            "candidate_id": "cand-ben",
            "name": "Ben",
            "skills": [{"name": "React", "proficiency_level": 6}],
        },
    ],
}


@pytest.fixture
def pool_file(tmp_path):
    path = tmp_path / "pool.json"
    path.write_text(json.dumps(POOL), encoding="utf-8")
    return path


def test_cli_parser_supports_subcommands() -> None:
    from skillmatch.__main__ import create_parser

    parser = create_parser()

    candidates = parser.parse_args(["candidates", "job-1", "--limit", "3", "--json"])
    assert candidates.mode == "candidates"
    assert candidates.job_id == "job-1"
    assert candidates.limit == 3
    assert candidates.json is True

    jobs = parser.parse_args(["jobs", "cand-1"])
    assert jobs.mode == "jobs"
    assert jobs.limit is None

    feedback = parser.parse_args(["feedback", "job-1", "cand-1", "--decision", "reject"])
    assert feedback.mode == "feedback"
    assert feedback.decision == "reject"


def test_cli_parser_rejects_non_positive_limit() -> None:
    from skillmatch.__main__ import create_parser

    with pytest.raises(SystemExit):
        create_parser().parse_args(["candidates", "job-1", "--limit", "0"])


def test_cli_without_mode_prints_help(capsys) -> None:
    from skillmatch.__main__ import main

    assert main([]) == 0
    assert "usage: skillmatch" in capsys.readouterr().out


def test_cli_candidates_prints_ranked_matches(pool_file, capsys) -> None:
    from skillmatch.__main__ import main

    exit_code = main(["--pool", str(pool_file), "candidates", "job-backend"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert out.index("Candidate: Ana (cand-ana)") < out.index("Candidate: Ben (cand-ben)")
    assert out.startswith("#1")


def test_cli_jobs_json_output(pool_file, capsys) -> None:
    from skillmatch.__main__ import main

    exit_code = main(
        ["--pool", str(pool_file), "jobs", "cand-ben", "--limit", "1", "--json"]
    )

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert len(payload) == 1
    assert payload[0]["job"]["job_id"] == "job-frontend"
    assert 0.0 <= payload[0]["score"]["total_score"] <= 1.0


def test_cli_unknown_job_errors_cleanly(pool_file, capsys) -> None:
    from skillmatch.__main__ import main

    exit_code = main(["--pool", str(pool_file), "candidates", "job-missing"])

    assert exit_code == 1
    assert "Job not found: job-missing" in capsys.readouterr().err


def test_cli_missing_pool_errors_cleanly(tmp_path, capsys) -> None:
    from skillmatch.__main__ import main

    exit_code = main(["--pool", str(tmp_path / "absent.yaml"), "jobs", "cand-ana"])

    assert exit_code == 1
    assert "Error:" in capsys.readouterr().err


def test_cli_feedback_persists_weights(pool_file, tmp_path, capsys) -> None:
    from skillmatch.__main__ import main

    db_path = tmp_path / "weights.db"
    base = ["--pool", str(pool_file), "--weights-db", str(db_path)]

    assert main([*base, "feedback", "job-backend", "cand-ana"]) == 0
    first = capsys.readouterr().out
    assert first.startswith("Weights: ")
    assert db_path.exists()

    assert main([*base, "candidates", "job-backend", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    learned = payload[0]["score"]["weights"]
    assert first.strip() == (
        "Weights: "
        f"skill={learned['skill']:.3f} "
        f"experience={learned['experience']:.3f} "
        f"education={learned['education']:.3f}"
    )


def test_cli_feedback_unknown_candidate_leaves_weights(pool_file, capsys) -> None:
    from skillmatch.__main__ import main

    exit_code = main(["--pool", str(pool_file), "feedback", "job-backend", "ghost"])

    assert exit_code == 1
    assert "weights unchanged" in capsys.readouterr().err
