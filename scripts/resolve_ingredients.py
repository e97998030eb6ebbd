import argparse
import datetime
import logging
import os

from kitchen_utils.catalog import load_catalog_csv, load_extracted_csv, write_bindings_csv
from kitchen_utils.exceptions import InvalidArgumentError
from kitchen_utils.ingredients import bind_extracted_ingredients

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    """Bind extracted recipe ingredients to an existing catalog snapshot."""
    parser_args = argparse.ArgumentParser(
        description="Resolve extracted ingredient names against an ingredient catalog"
    )
    parser_args.add_argument(
        "--catalog",
        type=str,
        required=True,
        help="Catalog CSV with id,name[,unit,cost_per_unit,category] columns",
    )
    parser_args.add_argument(
        "--extracted",
        type=str,
        required=True,
        help="CSV of extracted ingredients with name[,quantity,unit] columns",
    )
    parser_args.add_argument(
        "--exclude-id",
        action="append",
        default=[],
        help="Catalog id to leave out of matching (repeatable)",
    )
    parser_args.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker threads (default: executor default)",
    )
    parser_args.add_argument(
        "--output-dir",
        type=str,
        default=".",
        help="Directory to write output CSV files (default: current directory)",
    )
    args = parser_args.parse_args()

    try:
        catalog = load_catalog_csv(args.catalog)
        extracted = load_extracted_csv(args.extracted)
    except InvalidArgumentError as e:
        print(f"Could not load input files: {e}")
        exit(1)
    logger.info(f"Loaded {len(catalog)} catalog entries and {len(extracted)} extracted ingredients")

    if not extracted:
        print("No extracted ingredients to resolve.")
        exit(1)

    try:
        bindings = bind_extracted_ingredients(
            extracted,
            catalog,
            exclude_ids=args.exclude_id,
            max_workers=args.workers,
            show_progress=True,
        )
    except KeyboardInterrupt:
        print("\nProcessing interrupted by user")
        exit(1)

    bound = [b for b in bindings if not b.needs_review]
    review = [b for b in bindings if b.needs_review]

    os.makedirs(args.output_dir, exist_ok=True)
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    bound_file = os.path.join(args.output_dir, f"resolved_bound_{timestamp}.csv")
    review_file = os.path.join(args.output_dir, f"resolved_review_{timestamp}.csv")

    if bound:
        count = write_bindings_csv(bound, bound_file)
        print(f"Wrote {count} bound ingredients to {bound_file}")
    else:
        print("No ingredients could be bound automatically.")

    if review:
        count = write_bindings_csv(review, review_file)
        print(f"Wrote {count} ingredients needing review to {review_file}")
    else:
        print("No ingredients need manual review.")

    print(f"\nSummary:")
    print(f"  Total ingredients processed: {len(bindings)}")
    print(f"  Bound automatically: {len(bound)}")
    print(f"  Needing review: {len(review)}")
    print(f"  Bind rate: {len(bound) / len(bindings) * 100:.1f}%")


if __name__ == "__main__":
    main()
