from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from anilist_export.anilist.anilist_client import AniListClient
from anilist_export.anilist.archive import (
    build_export,
    load_archive,
    prior_score_names,
    resume_start_page,
    write_archive,
)
from anilist_export.anilist.fetch import Sleeper, fetch_activity_entries, fetch_media_list_entries, fetch_user
from anilist_export.anilist.models import ExportOutput, GraphQLTransport
from anilist_export.anilist.transform import build_user, transform_activities, transform_media_list
from anilist_export.utils.config import ANILIST_TOKEN, ANILIST_USERNAME, OUTPUT_PATH
from anilist_export.utils.logger import LoggerProtocol, ensure_logger, get_logger
from anilist_export.utils.safe_runner import safe_main

logger = get_logger("AniList Export")


def run_export(
    transport: GraphQLTransport,
    username: str,
    output_path: Path,
    token: str | None = None,
    update_data: bool = False,
    sleep: Sleeper = time.sleep,
    logger: LoggerProtocol | None = None,
) -> ExportOutput:
    """
    Export complet : fetch des deux collections, transformation, fusion, écriture.

    L'archive n'est écrite qu'une fois tout le reste réussi.
    """
    logger = ensure_logger(logger, __name__)

    prior: ExportOutput | None = None
    list_start = activity_start = 1
    if update_data:
        prior = load_archive(output_path, logger=logger)
        if prior is not None:
            list_start = resume_start_page(len(prior["lists"]))
            activity_start = resume_start_page(len(prior["activity"]))
            logger.info(
                "🔁 Mise à jour : %s entrées / %s activités déjà archivées, reprise pages %s / %s",
                len(prior["lists"]),
                len(prior["activity"]),
                list_start,
                activity_start,
            )

    profile = fetch_user(transport, username, token=token, logger=logger)
    user_id = profile["id"]
    media_list = fetch_media_list_entries(
        transport, user_id, token=token, start_page=list_start, sleep=sleep, logger=logger
    )
    activity_list = fetch_activity_entries(
        transport, user_id, token=token, start_page=activity_start, sleep=sleep, logger=logger
    )
    logger.info(
        "📥 %s entrées de liste et %s activités récupérées", len(media_list), len(activity_list)
    )

    lists, custom_lists, score_names = transform_media_list(media_list, prior_score_names(prior))
    activity = transform_activities(activity_list, logger=logger)
    user = build_user(profile, custom_lists, score_names)

    output = build_export(user, lists, activity, prior)
    write_archive(output_path, output, logger=logger)
    return output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anilist-export",
        description="Exporter la liste et l'activité AniList au format export GDPR",
    )
    parser.add_argument("--username", default=ANILIST_USERNAME or None, help="Nom d'utilisateur AniList")
    parser.add_argument("--token", default=ANILIST_TOKEN or None, help="Token API AniList (Bearer)")
    parser.add_argument(
        "--update-data",
        action="store_true",
        help="Reprendre depuis l'archive existante et fusionner",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=OUTPUT_PATH,
        help=f"Fichier de sortie (défaut : {OUTPUT_PATH})",
    )
    return parser


@safe_main
def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.username:
        parser.print_usage(sys.stderr)
        print("anilist-export: error: --username est requis", file=sys.stderr)
        return 1

    client = AniListClient()
    try:
        output = run_export(
            client,
            args.username,
            args.output,
            token=args.token,
            update_data=args.update_data,
            logger=logger,
        )
    finally:
        client.close()

    print(f"Wrote {len(output['lists'])} lists and {len(output['activity'])} activity items to {args.output}")
    logger.info("✅ Export terminé")
    return 0


def cli() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    cli()
