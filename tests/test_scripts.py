from scripts import run_server


def test_run_server_starts_uvicorn_with_app(monkeypatch):
    calls = []
    monkeypatch.setattr(run_server.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr("sys.argv", ["run_server.py", "--port", "9001"])

    run_server.main()

    assert calls == [("recipe_keeper.app.main:app", {"host": "127.0.0.1", "port": 9001, "reload": False})]
