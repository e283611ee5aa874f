from editor_link.domain.messages import (
    DancerStatus,
    Identity,
    Message,
    TaskKind,
    classify,
    pause_command,
    play_command,
    stop_command,
)


class TestClassify:
    def test_known_tasks(self):
        assert classify("getIp") == TaskKind.GET_IP
        assert classify("disconnect") == TaskKind.DISCONNECT
        assert classify("play") == TaskKind.PLAY
        assert classify("pause") == TaskKind.PAUSE
        assert classify("stop") == TaskKind.STOP

    def test_unknown_task_is_status_report(self):
        assert classify("weirdTask") == TaskKind.STATUS_REPORT
        assert classify("uploadControl") == TaskKind.STATUS_REPORT

    def test_task_names_are_case_sensitive(self):
        assert classify("Play") == TaskKind.STATUS_REPORT

    def test_message_kind(self):
        assert Message("getIp", {}).kind == TaskKind.GET_IP


class TestDancerStatus:
    def test_as_dict_omits_unspecified_fields(self):
        assert DancerStatus(ok=True, msg="hi").as_dict() == {"ok": True, "msg": "hi"}

    def test_as_dict_full(self):
        status = DancerStatus(ok=True, msg="Connect Success", is_connected=True, ip="1.2.3.4")
        assert status.as_dict() == {
            "ok": True,
            "msg": "Connect Success",
            "isConnected": True,
            "ip": "1.2.3.4",
        }

    def test_disconnected_is_kept(self):
        assert DancerStatus(ok=False, msg="lost", is_connected=False).as_dict()["isConnected"] is False


class TestIdentity:
    def test_announcement(self):
        message = Identity(name="booth").announcement()
        assert message == Message("boardInfo", {"type": "editor", "name": "booth"})


class TestCommands:
    def test_play_forwards_payload(self):
        assert play_command({"startTime": 1200}) == Message("play", {"startTime": 1200})

    def test_play_without_payload(self):
        assert play_command() == Message("play", {})

    def test_pause_and_stop(self):
        assert pause_command() == Message("pause", {})
        assert stop_command() == Message("stop", {})
