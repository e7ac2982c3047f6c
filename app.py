"""Console chat with an agent persona."""

import argparse
import sys
import uuid
from typing import List, Optional, TextIO

from dotenv import load_dotenv


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with an agent persona.")
    parser.add_argument("--agent", required=False, help="Persona slug (prompts/<slug>_prompt.toml).")
    parser.add_argument("--prompts-dir", required=False, help="Directory with persona TOML files.")
    parser.add_argument("--env-file", default=".env", help="Env file loaded before settings.")
    parser.add_argument(
        "--echo",
        action="store_true",
        help="Use the offline echo completion instead of OpenAI.",
    )
    parser.add_argument(
        "--voice",
        action="store_true",
        help="Treat each line as a voice transcript (spoken-conversation prompt).",
    )
    parser.add_argument("--list", action="store_true", help="List available personas and exit.")
    return parser.parse_args(argv)


def chat(
    args: argparse.Namespace,
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
) -> int:
    """Read user lines until EOF or /quit, printing each agent reply."""
    from src.agents.lib_agent.agent_prompt_loader import AgentPromptLoader
    from src.services.chatbot import get_conversation_service

    loader = AgentPromptLoader(args.prompts_dir)
    if args.list or not args.agent:
        for slug in loader.available():
            print(slug, file=stdout)
        return 0 if args.list else 2

    agent = loader.get_profile(args.agent)
    service = get_conversation_service(echo=args.echo)
    conversation_id = uuid.uuid4().hex

    print(f"Chatting with {agent.display_name}. Type /quit to leave.", file=stdout)
    for line in stdin:
        text = line.strip()
        if not text:
            continue
        if text == "/quit":
            break
        if args.voice:
            reply = service.send_voice_text(conversation_id, text, agent)
        else:
            reply = service.send_message(conversation_id, text, agent)
        print(f"{agent.display_name}: {reply.response}", file=stdout)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    # settings são instanciados no import de configs
    load_dotenv(args.env_file)
    return chat(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
