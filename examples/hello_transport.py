"""Minimal hello-world demo: browse a public Prismic repository as a node tree."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running directly from the repo without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from prismic_cr.core.babel_fish import Query  # noqa: E402
from prismic_cr.core.exceptions import RepositoryError  # noqa: E402
from prismic_cr.core.xfiles import DebugStack, TransportFactory  # noqa: E402

URI = "https://%s.cdn.prismic.io/api"
WORKSPACE = "lesbonneschoses"


def main() -> int:
    calls = DebugStack()
    result = TransportFactory().execute_create({"prismic_cr.uri": URI, "prismic_cr.logger": calls})
    if not result.is_ok():
        print(f"[error] {result.detail.code}: {result.detail.message}")
        return 1
    transport = result.transport

    try:
        print(f"[hello] logging in to {transport.login(workspace_name=WORKSPACE)}")

        root = transport.get_node("/")
        print(f"[root] {len(root.children)} documents")
        for name in list(root.children)[:5]:
            node = transport.get_node(f"/{name}")
            print(f"[node] /{name} -> {node.primary_type}")

        types = [definition.name for definition in transport.get_node_types()]
        print(f"[types] {', '.join(t for t in types if t.startswith('prismic:'))}")

        rows = transport.query(Query("SELECT * FROM [prismic:article]", limit=3))
        for row in rows:
            print(f"[query] {row.path} title={row.values.get('title')!r}")
    except RepositoryError as exc:
        print(f"[error] {exc}")
        return 1
    finally:
        transport.logout()

    total = sum(record.duration or 0 for record in calls.calls)
    print(f"[done] {len(calls.calls)} transport calls in {total:.2f}s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
