"""Tests for the Python client library against the real app."""

import json
import threading

import pytest
from fastapi.testclient import TestClient

from app.client import ClientApp, NotSignedIn, Screen, SessionBusy, Tab, VoiceAppAPI
from app.client.api import ApiError
from app.client.cli import main as cli_main
from tests.fakes import FakeDevice, FakePlayer, offline_http


def make_app(client: TestClient, device: FakeDevice | None = None) -> ClientApp:
    return ClientApp(VoiceAppAPI(http=client), device=device or FakeDevice(), poll_interval=None)


@pytest.fixture(name="alice")
def alice_fixture(client: TestClient) -> ClientApp:
    app = make_app(client)
    assert app.signup("alice@example.com", "pw", "Paris", "France")
    return app


@pytest.fixture(name="bob")
def bob_fixture(client: TestClient) -> ClientApp:
    app = make_app(client)
    assert app.signup("bob@example.com", "pw")
    return app


class TestVoiceAppAPI:
    def test_error_carries_server_message(self, client: TestClient):
        api = VoiceAppAPI(http=client)
        with pytest.raises(ApiError) as exc:
            api.login("nobody@example.com", "pw")
        assert exc.value.status_code == 400
        assert exc.value.message == "Invalid credentials"

    def test_token_is_kept(self, client: TestClient):
        api = VoiceAppAPI(http=client)
        data = api.signup("c@example.com", "pw")
        assert api.token == data["token"]
        assert api.verify(api.token)["userId"] == data["user"]["id"]
        assert api.list_voices() == []

    def test_post_and_fetch_audio(self, client: TestClient):
        api = VoiceAppAPI(http=client)
        api.signup("d@example.com", "pw")
        voice_id = api.post_voice(b"sound", "clip.webm")
        voice = api.list_my_voices()[0]
        assert voice["id"] == voice_id
        assert api.fetch_audio(voice["audioUrl"]) == b"sound"


class TestNavigation:
    def test_auth_screens(self, client: TestClient):
        app = make_app(client)
        assert app.screen is Screen.LOGIN
        app.show_signup()
        assert app.screen is Screen.SIGNUP
        app.show_login()
        assert app.screen is Screen.LOGIN

    def test_login_failure_alerts(self, client: TestClient):
        app = make_app(client)
        assert not app.login("nobody@example.com", "pw")
        assert app.screen is Screen.LOGIN
        assert app.alerts == ["Invalid credentials"]

    def test_signup_enters_main(self, alice: ClientApp):
        assert alice.screen is Screen.MAIN
        assert alice.tab is Tab.FEED
        assert alice.user["email"] == "alice@example.com"

    def test_tabs_need_main_screen(self, client: TestClient):
        with pytest.raises(NotSignedIn):
            make_app(client).select_tab(Tab.PROFILE)

    def test_select_profile_tab(self, alice: ClientApp):
        alice.select_tab(Tab.PROFILE)
        assert alice.tab is Tab.PROFILE

    def test_logout(self, alice: ClientApp):
        alice.start_recording()
        alice.logout()
        assert alice.screen is Screen.LOGIN
        assert alice.user is None
        assert alice.api.token is None
        assert not alice.recorder.active
        assert len(alice.waveforms) == 0


class TestRecording:
    def test_post_recording(self, client: TestClient):
        device = FakeDevice((b"ab", b"cd"))
        app = make_app(client, device)
        app.signup("rec@example.com", "pw")

        app.start_recording()
        assert app.recorder.active
        voice_id = app.stop_recording()

        assert not app.recorder.active
        assert device.streams[0].closed
        assert [v["id"] for v in app.voices] == [voice_id]
        assert [v["id"] for v in app.my_voices] == [voice_id]
        assert app.api.fetch_audio(app.voices[0]["audioUrl"]) == b"abcd"

    def test_second_recording_is_refused(self, alice: ClientApp):
        alice.start_recording()
        with pytest.raises(SessionBusy):
            alice.start_recording()

    def test_reply_slot(self, alice: ClientApp, bob: ClientApp):
        alice.start_recording()
        first = alice.stop_recording()
        alice.start_recording()
        second = alice.stop_recording()

        bob.refresh()
        bob.start_reply(first)
        with pytest.raises(SessionBusy):
            bob.start_reply(second)
        reply_id = bob.stop_reply()

        voice = next(v for v in bob.voices if v["id"] == first)
        assert [r["id"] for r in voice["replies"]] == [reply_id]
        assert voice["replies"][0]["user"]["email"] == "bob@example.com"

    def test_recording_needs_main_screen(self, client: TestClient):
        with pytest.raises(NotSignedIn):
            make_app(client).start_recording()


class TestMutations:
    def test_like_uses_server_count(self, alice: ClientApp, bob: ClientApp):
        alice.start_recording()
        voice_id = alice.stop_recording()
        bob.refresh()

        result = bob.like(voice_id)
        assert result == {"likes": 1, "likedByUser": True}
        assert bob.voices[0]["likes"] == 1

        alice.like(voice_id)
        assert alice.voices[0]["likes"] == 2

        bob.like(voice_id)
        assert bob.voices[0]["likes"] == 1
        assert bob.voices[0]["likedByUser"] is False

    def test_failed_like_becomes_notice(self, alice: ClientApp):
        assert alice.like("missing") is None
        assert alice.notices == ["Like failed: Voice not found"]

    def test_delete(self, alice: ClientApp, bob: ClientApp):
        alice.start_recording()
        voice_id = alice.stop_recording()
        bob.refresh()

        assert not bob.delete(voice_id)
        assert bob.notices == ["Delete failed: Voice not found"]

        assert alice.delete(voice_id)
        assert alice.voices == []
        assert alice.my_voices == []

    def test_update_profile(self, alice: ClientApp):
        assert alice.update_profile(city="Lyon")
        assert alice.user["city"] == "Lyon"
        assert alice.user["country"] == "France"

    def test_profile_picture(self, alice: ClientApp):
        assert alice.set_profile_picture(b"\x89PNG", "me.png")
        assert alice.user["profilePic"].endswith("-me.png")

    def test_rejected_profile_picture(self, alice: ClientApp):
        assert not alice.set_profile_picture(b"text", "me.txt", "text/plain")
        assert alice.notices[0].startswith("Profile picture upload failed")


class TestFeedState:
    def test_stale_feed_response_is_ignored(self, alice: ClientApp):
        older = alice.next_feed_seq()
        newer = alice.next_feed_seq()
        assert alice.apply_feed(newer, [])
        assert not alice.apply_feed(older, [{"id": "stale", "audioUrl": "/audio/x", "replies": []}])
        assert alice.voices == []

    def test_waveforms_follow_listings(self, alice: ClientApp, bob: ClientApp):
        alice.start_recording()
        voice_id = alice.stop_recording()
        bob.refresh()
        bob.start_reply(voice_id)
        reply_id = bob.stop_reply()
        alice.refresh()

        assert f"feed-{voice_id}" in alice.waveforms
        assert f"feed-reply-{reply_id}" in alice.waveforms
        assert f"mine-{voice_id}" in alice.waveforms

        player = alice.waveforms.get(f"feed-{voice_id}")
        assert alice.play(voice_id)
        assert player.playing
        assert player.data == b"\x1a\x45\xdf\xa3"

        alice.delete(voice_id)
        assert f"feed-{voice_id}" not in alice.waveforms
        assert player.destroyed


class TestCli:
    def test_signup_post_and_feed(self, client: TestClient, tmp_path, capsys):
        api = VoiceAppAPI(http=client)
        clip = tmp_path / "hello.webm"
        clip.write_bytes(b"\x00" * 100)

        assert cli_main(["signup", "cli@example.com", "pw", "--city", "Quito"], api=api) == 0
        signup = json.loads(capsys.readouterr().out)
        assert signup["user"]["city"] == "Quito"

        assert cli_main(["post", str(clip)], api=api) == 0
        voice_id = json.loads(capsys.readouterr().out)["id"]

        assert cli_main(["like", voice_id], api=api) == 0
        assert json.loads(capsys.readouterr().out) == {"likes": 1, "likedByUser": True}

        assert cli_main(["feed"], api=api) == 0
        feed = json.loads(capsys.readouterr().out)
        assert [v["id"] for v in feed] == [voice_id]

    def test_api_error_exit_code(self, client: TestClient):
        assert cli_main(["login", "nobody@example.com", "pw"], api=VoiceAppAPI(http=client)) == 1

    def test_missing_file_exit_code(self, client: TestClient, tmp_path):
        api = VoiceAppAPI(http=client)
        api.signup("cli2@example.com", "pw")
        assert cli_main(["post", str(tmp_path / "missing.webm")], api=api) == 1


class TestUnreachableServer:
    def test_login_failure_alerts(self):
        app = ClientApp(VoiceAppAPI(http=offline_http()), poll_interval=None)
        assert not app.login("alice@example.com", "pw")
        assert app.screen is Screen.LOGIN
        assert app.alerts == ["connection refused"]

    def test_signup_failure_alerts(self):
        app = ClientApp(VoiceAppAPI(http=offline_http()), poll_interval=None)
        assert not app.signup("alice@example.com", "pw")
        assert app.alerts == ["connection refused"]

    def test_recording_is_kept_for_resend(self, alice: ClientApp):
        online = alice.api.http
        alice.start_recording()
        alice.api.http = offline_http()

        assert alice.stop_recording() is None
        assert not alice.recorder.active
        assert "Posting voice failed: connection refused" in alice.notices
        assert "Refresh failed: connection refused" in alice.notices
        assert len(alice.unsent) == 1

        alice.api.http = online
        created = alice.resend()
        assert len(created) == 1
        assert alice.unsent == []
        assert [v["id"] for v in alice.my_voices] == created

    def test_rejected_reply_is_not_kept(self, bob: ClientApp):
        bob.start_reply("missing")
        assert bob.stop_reply() is None
        assert bob.notices == ["Reply failed: Voice not found"]
        assert bob.unsent == []

    def test_mutations_record_notices(self, alice: ClientApp):
        alice.start_recording()
        voice_id = alice.stop_recording()
        alice.api.http = offline_http()

        assert alice.like(voice_id) is None
        assert not alice.delete(voice_id)
        assert not alice.update_profile(city="Lyon")
        assert "Like failed: connection refused" in alice.notices
        assert "Delete failed: connection refused" in alice.notices
        assert "Profile update failed: connection refused" in alice.notices
        assert [v["id"] for v in alice.voices] == [voice_id]

    def test_cli_exit_code(self):
        assert cli_main(["feed"], api=VoiceAppAPI(http=offline_http())) == 1


class TestConcurrentRefresh:
    def test_waveforms_match_the_last_applied_feed(self, client: TestClient):
        created: list[FakePlayer] = []

        def factory(key: str, url: str) -> FakePlayer:
            player = FakePlayer(key, url)
            created.append(player)
            return player

        app = ClientApp(VoiceAppAPI(http=client), player_factory=factory, poll_interval=None)
        feeds = [
            [{"id": f"{prefix}{i}", "audioUrl": f"/audio/{prefix}{i}", "replies": []} for i in range(30)]
            for prefix in ("a", "b")
        ]
        errors: list[Exception] = []

        def apply_repeatedly(voices: list[dict]) -> None:
            try:
                for _ in range(100):
                    app.apply_feed(app.next_feed_seq(), voices)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=apply_repeatedly, args=(feed,)) for feed in feeds]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        expected = {f"feed-{v['id']}" for v in app.voices}
        live = [p for p in created if not p.destroyed]
        assert {p.key for p in live} == expected
        assert len(app.waveforms) == len(expected)
        assert all(app.waveforms.get(p.key) is p for p in live)
