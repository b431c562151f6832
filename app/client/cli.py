"""Command line client: ``voiceapp-cli [--url URL] [--token TOKEN] <command> ...``."""

import argparse
import json
import logging
import os
import sys

import httpx

from app.client.api import ApiError, VoiceAppAPI
from app.client.recording import CaptureSession, FileCaptureDevice

logger = logging.getLogger("voiceapp.client")


def _record_file(path: str, target: str | None = None):
    """Run a file through a capture session so uploads follow the recording path."""
    session = CaptureSession(FileCaptureDevice(path))
    session.start(target)
    return session.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="voiceapp-cli", description="VoiceApp command line client")
    parser.add_argument("--url", default=os.getenv("VOICEAPP_URL", "http://localhost:8000"))
    parser.add_argument("--token", default=os.getenv("VOICEAPP_TOKEN"))
    sub = parser.add_subparsers(dest="command", required=True)

    signup = sub.add_parser("signup", help="create an account and print its token")
    signup.add_argument("email")
    signup.add_argument("password")
    signup.add_argument("--city")
    signup.add_argument("--country")

    login = sub.add_parser("login", help="print a fresh token")
    login.add_argument("email")
    login.add_argument("password")

    post = sub.add_parser("post", help="post an audio file as a voice")
    post.add_argument("file")

    reply = sub.add_parser("reply", help="reply to a voice with an audio file")
    reply.add_argument("voice_id")
    reply.add_argument("file")

    for name in ("like", "unlike", "delete", "replies"):
        cmd = sub.add_parser(name, help=f"{name} a voice" if name != "replies" else "list replies of a voice")
        cmd.add_argument("voice_id")

    sub.add_parser("feed", help="list all voices, newest first")
    sub.add_parser("mine", help="list your own voices")
    return parser


def run(args: argparse.Namespace, api: VoiceAppAPI) -> object:
    if args.command == "signup":
        return api.signup(args.email, args.password, args.city, args.country)
    if args.command == "login":
        return api.login(args.email, args.password)
    if args.command == "post":
        recording = _record_file(args.file)
        return {"id": api.post_voice(recording.data, os.path.basename(args.file), recording.mime_type)}
    if args.command == "reply":
        recording = _record_file(args.file, args.voice_id)
        return {"id": api.reply(args.voice_id, recording.data, os.path.basename(args.file), recording.mime_type)}
    if args.command in ("like", "unlike"):
        return api.like(args.voice_id, args.command == "like")
    if args.command == "delete":
        api.delete_voice(args.voice_id)
        return {"success": True}
    if args.command == "replies":
        return api.replies(args.voice_id)
    if args.command == "feed":
        return api.list_voices()
    return api.list_my_voices()


def main(argv: list[str] | None = None, api: VoiceAppAPI | None = None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    api = api or VoiceAppAPI(base_url=args.url)
    if args.token:
        api.token = args.token

    try:
        result = run(args, api)
    except ApiError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    except httpx.HTTPError as e:
        logger.error("%s failed: cannot reach %s: %s", args.command, args.url, e)
        return 1
    except OSError as e:
        logger.error("Cannot read %s: %s", getattr(args, "file", ""), e)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
