import logging
import sys
import json
import argparse

from core.config_loader import load_config
from core.app_context import AppContext
from core.enums import OfferResponse
from core.assignment.detection import calculate_working_deadline
from core.assignment.exceptions import AssignmentError, TaskNotFoundError
from database.database import configure_database
from database.uow import assignment_uow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _score_to_dict(score):
    return {
        'artist_id': score.artist.user_id,
        'name': score.artist.name,
        'total_score': score.total_score,
        'breakdown': score.breakdown.to_dict(),
    }


def _load_task(repo, task_id, lock=False):
    task = repo.tasks.get_task_data(task_id, lock=lock)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


def cmd_rank(context, args):
    with assignment_uow() as repo:
        services = context.services(repo)
        task = _load_task(repo, args.task_id)
        ranked = services.ranking.rank_artists_for_task(task, args.level)
    for score in ranked[:args.top]:
        print(json.dumps(_score_to_dict(score)))


def cmd_offer(context, args):
    with assignment_uow() as repo:
        services = context.services(repo)
        task = _load_task(repo, args.task_id, lock=True)
        best = services.ranking.find_next_best_artist(task, args.level)
        if best is None:
            logger.info(f"No artist available for task {task.id} at level {args.level}")
            return
        offer_id = services.offers.create_task_offer(task.id, best, args.level, urgency=task.urgency)
    print(json.dumps({'offer_id': str(offer_id), **_score_to_dict(best)}))


def cmd_respond(context, args):
    response = OfferResponse(args.response)
    with assignment_uow() as repo:
        services = context.services(repo)
        offer = services.offers.record_response(
            response,
            task_id=args.task_id,
            artist_id=args.artist_id,
            reason=args.reason,
            note=args.note,
        )
        services.metrics.update_artist_metrics(offer.artist_id)
        task = _load_task(repo, args.task_id, lock=True)
        if response is OfferResponse.ACCEPTED:
            working_deadline = None
            if task.deadline:
                working_deadline = calculate_working_deadline(
                    offer.responded_at,
                    task.deadline,
                    context.config.assignment.working_deadline_ratio
                )
            repo.tasks.mark_assigned(task.id, offer.artist_id, working_deadline, offer.responded_at)
            logger.info(f"Task {task.id} assigned to {offer.artist_id}")
        else:
            outcome = services.escalation.handle_declined_or_expired(task)
            logger.info(f"Task {task.id}: next action {outcome.action.value} (level {outcome.escalation_level})")


def cmd_expire_offers(context, args):
    with assignment_uow() as repo:
        services = context.services(repo)
        expired = services.offers.expire_overdue_offers()
        for offer in expired:
            services.metrics.update_artist_metrics(offer.artist_id)
            task = _load_task(repo, offer.task_id, lock=True)
            outcome = services.escalation.handle_declined_or_expired(task)
            logger.info(f"Task {task.id}: next action {outcome.action.value} (level {outcome.escalation_level})")


def cmd_update_metrics(context, args):
    with assignment_uow() as repo:
        metrics = context.services(repo).metrics.update_artist_metrics(args.artist_id)
    if metrics is None:
        logger.info(f"Artist {args.artist_id} has no offer history yet")


def cmd_publish_config(context, args):
    with assignment_uow() as repo:
        context.services(repo).config_provider.publish(args.config_id)


def cmd_init_db(context, args):
    from database.init_db import init_db
    init_db()


def build_parser():
    parser = argparse.ArgumentParser(description="Artist assignment engine")
    parser.add_argument('--config', default='config.yaml', help='Path to config.yaml')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('init-db', help='Create tables')
    p.set_defaults(func=cmd_init_db)

    p = sub.add_parser('rank', help='Rank artists for a task')
    p.add_argument('task_id')
    p.add_argument('--level', type=int, default=1)
    p.add_argument('--top', type=int, default=10)
    p.set_defaults(func=cmd_rank)

    p = sub.add_parser('offer', help='Offer a task to the next best artist')
    p.add_argument('task_id')
    p.add_argument('--level', type=int, default=1)
    p.set_defaults(func=cmd_offer)

    p = sub.add_parser('respond', help="Record an artist's response to a pending offer")
    p.add_argument('task_id')
    p.add_argument('artist_id')
    p.add_argument('response', choices=[OfferResponse.ACCEPTED.value, OfferResponse.REJECTED.value])
    p.add_argument('--reason')
    p.add_argument('--note')
    p.set_defaults(func=cmd_respond)

    p = sub.add_parser('expire-offers', help='Expire overdue offers and escalate their tasks')
    p.set_defaults(func=cmd_expire_offers)

    p = sub.add_parser('update-metrics', help="Recompute an artist's performance metrics")
    p.add_argument('artist_id')
    p.set_defaults(func=cmd_update_metrics)

    p = sub.add_parser('publish-config', help='Activate a stored algorithm config')
    p.add_argument('config_id')
    p.set_defaults(func=cmd_publish_config)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    configure_database(config.database.url)
    context = AppContext(config=config)
    try:
        args.func(context, args)
    except AssignmentError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
