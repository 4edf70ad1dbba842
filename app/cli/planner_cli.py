"""Interactive CLI client for the planner HTTP API."""

from __future__ import annotations

import argparse
import re

import requests

HELP_TEXT = """\
Commands:
  new                 fill the form and generate proposals
  pick <n>            generate the plan for proposal n
  show                print the current plan
  toggle <n>          collapse or expand section n
  refine              open the refinement assistant (empty line closes it)
  save                save the current plan to the history
  history             list saved projects
  open <id>           open a saved project
  pdf <file>          export the current plan to a PDF file
  podcast             generate the podcast script and start narration
  exit                quit"""

_TAG_RE = re.compile(r"<[^>]+>")


def _plain(fragment: str) -> str:
    text = fragment.replace("<br>", "\n").replace("</li>", "\n")
    return _TAG_RE.sub("", text).strip()


class PlannerClient:
    def __init__(self, base_url: str, timeout: int) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.proposals: list[dict] = []

    def request(self, method: str, path: str, **kwargs):
        resp = requests.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if resp.status_code != 200:
            print(f"Error {resp.status_code}: {resp.text}")
            return None
        return resp

    def print_plan(self, payload: dict) -> None:
        print(f"\n== {payload['proposal_name']} ==")
        if payload.get("preamble_html"):
            print(_plain(payload["preamble_html"]))
        for number, section in enumerate(payload["sections"], start=1):
            marker = "-" if section.get("expanded") else "+"
            print(f"\n[{marker}] ({number}) {section['title']}")
            if section.get("expanded"):
                print(_plain(section.get("html") or section.get("text") or ""))

    def new_project(self) -> None:
        form = {
            "grade": input("Grado(s): ").strip(),
            "topic": input("Tema: ").strip(),
            "resources": input("Recursos (A-F): ").strip().upper(),
            "time": input("Tiempo estimado: ").strip(),
        }
        resp = self.request("POST", "/proposals", json=form)
        if resp is None:
            return
        data = resp.json()
        self.proposals = data["proposals"]
        if data.get("diagnostic"):
            print(data["diagnostic"])
        for number, proposal in enumerate(self.proposals, start=1):
            print(f"\n[{number}] {proposal['name']}")
            print(f"    {proposal['summary']}")
            print(f"    Recursos: {proposal['resource_level']}")

    def pick(self, number: str) -> None:
        try:
            proposal = self.proposals[int(number) - 1]
        except (ValueError, IndexError):
            print("Unknown proposal number.")
            return
        resp = self.request("POST", "/plan", json={"proposal_name": proposal["name"]})
        if resp is not None:
            self.print_plan(resp.json())

    def toggle(self, number: str) -> None:
        if not number.strip().isdigit():
            print("Unknown section number.")
            return
        resp = self.request("POST", f"/plan/sections/{int(number) - 1}/toggle")
        if resp is not None:
            self.print_plan(resp.json())

    def refine(self) -> None:
        resp = self.request("POST", "/refine/start", json={})
        if resp is None:
            return
        print(resp.json()["greeting"])
        while True:
            message = input("refine> ").strip()
            if not message:
                break
            resp = self.request("POST", "/refine/message", json={"message": message})
            if resp is None:
                continue
            data = resp.json()
            print(_plain(data["reply_html"]))
            if data["changed_sections"]:
                print("Secciones modificadas: " + ", ".join(data["changed_sections"]))
        self.request("DELETE", "/refine")

    def history(self) -> None:
        resp = self.request("GET", "/projects")
        if resp is None:
            return
        data = resp.json()
        print(f"{data['count']} proyecto(s)")
        for project in data["projects"]:
            print(f"  {project['id']}  {project['proposalName']}  ({project['grade']}, {project['topic']})")

    def export(self, path: str) -> None:
        payload = {
            "teacher_name": input("Docente(s) Responsable(s): ").strip(),
            "school_name": input("Institución Educativa: ").strip(),
        }
        if not all(payload.values()):
            print("Both names are required for the PDF.")
            return
        resp = self.request("POST", "/export/pdf", json=payload)
        if resp is None:
            return
        with open(path, "wb") as fh:
            fh.write(resp.content)
        print(f"PDF written to {path}")

    def podcast(self) -> None:
        resp = self.request("POST", "/podcast")
        if resp is None:
            return
        data = resp.json()
        print(data["script"])
        self.request("POST", "/podcast/play")


def main() -> int:
    parser = argparse.ArgumentParser(description="Interactive lesson-plan CLI")
    parser.add_argument(
        "--url",
        default="http://127.0.0.1:8000",
        help="Planner API base URL",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=300,
        help="Request timeout in seconds",
    )
    args = parser.parse_args()

    client = PlannerClient(args.url, args.timeout)
    print("Type 'help' for commands. Ctrl+D or 'exit' to quit.")

    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            print()
            break

        if not line:
            continue
        command, _, argument = line.partition(" ")
        command = command.lower()
        if command in {"exit", "quit"}:
            break

        try:
            if command == "help":
                print(HELP_TEXT)
            elif command == "new":
                client.new_project()
            elif command == "pick":
                client.pick(argument)
            elif command == "show":
                resp = client.request("GET", "/plan")
                if resp is not None:
                    client.print_plan(resp.json())
            elif command == "toggle":
                client.toggle(argument)
            elif command == "refine":
                client.refine()
            elif command == "save":
                resp = client.request("POST", "/projects")
                if resp is not None:
                    print(f"Guardado con id {resp.json()['id']}")
            elif command == "history":
                client.history()
            elif command == "open":
                resp = client.request("GET", f"/projects/{argument.strip()}")
                if resp is not None:
                    client.print_plan(resp.json())
            elif command == "pdf":
                client.export(argument.strip() or "plan-proyecto.pdf")
            elif command == "podcast":
                client.podcast()
            else:
                print(f"Unknown command: {command}")
        except requests.RequestException as exc:
            print(f"Request failed: {exc}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
