# usedbooks/data/seed.py
import argparse

from usedbooks.data.database import Database
from usedbooks.repos.cart_repo import CartRepo
from usedbooks.repos.product_repo import ProductRepo
from usedbooks.services.product_service import ProductService
from usedbooks.services.user_service import UserService
from usedbooks.utils.settings import ADMIN_PASSWORD, ADMIN_USER_ID
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCT_CATALOG = [
    {
        "slug": "calc-made-easy",
        "name": "Calculus Made Easy (3rd Ed.)",
        "price": "29.50",
        "short_description": "Lightly highlighted copy of Thompson & Gardner's classic reference. Perfect for MAT301 and MAT302.",
        "description": "Ships with the laminated formula card and a handful of professor notes tucked inside the back cover. Pages are clean, binding is tight, and only 12 pages contain pencil annotations that can be erased.",
        "headline": "A step-by-step refresher for STEM majors",
        "specs": [
            "Author: Silvanus P. Thompson & Martin Gardner",
            "ISBN: 978-1259586130",
            "Condition: Good (minor pencil notes)",
            "Format: Paperback, includes formula card",
        ],
        "image": "https://m.media-amazon.com/images/I/410KfWepEFL._AC_UF1000,1000_QL80_.jpg",
    },
    {
        "slug": "psych-exploration",
        "name": "Psychology: An Exploration (4th Ed.)",
        "price": "42.00",
        "short_description": "Used in PSY 100. Includes untouched MyLab access code still sealed in the sleeve.",
        "description": "Cover shows slight shelf wear, but the interior is pristine. Great option if you want the latest DSM-5 updates without paying bookstore pricing.",
        "headline": "Everything you need for Intro to Psychology",
        "specs": [
            "Author: Saundra Ciccarelli & J. Noland White",
            "ISBN: 978-0134636850",
            "Condition: Very Good",
            "Bonus: Unused MyLab code included",
        ],
        "image": "https://covers.openlibrary.org/b/isbn/9780134636850-L.jpg",
    },
    {
        "slug": "python-workshop",
        "name": "Python Crash Course (2nd Ed.)",
        "price": "25.75",
        "short_description": "Ideal for CSC 101 lab sections. Code samples are flagged with sticky notes for quick reference.",
        "description": "Well-kept paperback with no coffee stains or loose pages. Comes with a printed cheat sheet of common terminal commands created by the previous owner.",
        "headline": "Kick-start your first programming portfolio",
        "specs": [
            "Author: Eric Matthes",
            "ISBN: 978-1593279288",
            "Condition: Excellent",
            "Extras: Laminated quick reference sheet",
        ],
        "image": "https://m.media-amazon.com/images/I/71pys4B4OVL._AC_UF1000,1000_QL80_.jpg",
    },
    {
        "slug": "human-anatomy",
        "name": "Human Anatomy & Physiology (11th Ed.)",
        "price": "68.00",
        "short_description": "Required for BIO 425. Comes with a lightly used lab manual and intact diagrams.",
        "description": "Spiral binding is still sturdy, tabs have been added for each body system, and the lab manual only has two completed exercises.",
        "headline": "Study-ready visuals for pre-nursing tracks",
        "specs": [
            "Author: Elaine N. Marieb & Katja Hoehn",
            "ISBN: 978-0134580993",
            "Condition: Very Good",
            "Includes: Lab manual + tab set",
        ],
        "image": "https://m.media-amazon.com/images/I/81bIGIKwOML._AC_UF1000,1000_QL80_.jpg",
    },
    {
        "slug": "public-speaking",
        "name": "The Art of Public Speaking (13th Ed.)",
        "price": "19.25",
        "short_description": "Helpful for SPE 100. Margin notes emphasize delivery tips from the lectures.",
        "description": "Sticker residue on the cover, otherwise in solid shape. Includes a printed rubric template to guide practice speeches.",
        "headline": "Confidence-building tips from a fellow student",
        "specs": [
            "Author: Stephen Lucas",
            "ISBN: 978-1260412932",
            "Condition: Good",
            "Bonus: Speech outline template",
        ],
        "image": "https://m.media-amazon.com/images/I/81qt2t60JbL._AC_UF1000,1000_QL80_.jpg",
    },
]


def seed(database: Database, force: bool = False) -> int:
    db = database.session()
    try:
        repo = ProductRepo(db)
        # bez --force tylko do pustego katalogu
        if repo.list_products() and not force:
            logger.info("Catalog not empty, skipping seed")
            return 0
        if force:
            # usuniecie produktu zawsze czysci go ze wszystkich koszykow
            slugs = [p.slug for p in repo.list_products()]
            CartRepo(db).purge_products(slugs)
            repo.delete_all()
            repo.commit()

        service = ProductService(db)
        for entry in PRODUCT_CATALOG:
            service.create_product(None, entry, slug=entry["slug"])
        logger.info(f"Seeded {len(PRODUCT_CATALOG)} products")
        return len(PRODUCT_CATALOG)
    finally:
        db.close()


def seed_admin(database: Database, password: str) -> None:
    db = database.session()
    try:
        UserService(db).ensure_admin(password)
        logger.info(f"Admin account {ADMIN_USER_ID} ready")
    finally:
        db.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Load the demo textbook catalog.")
    parser.add_argument("--force", action="store_true", help="replace existing products")
    parser.add_argument("--database-url", default=None)
    parser.add_argument(
        "--admin-password",
        default=ADMIN_PASSWORD,
        help="create the admin account with this password (defaults to ADMIN_PASSWORD)",
    )
    args = parser.parse_args(argv)

    database = Database(args.database_url)
    database.create_all()
    seed(database, force=args.force)
    if args.admin_password:
        seed_admin(database, args.admin_password)
    database.dispose()


if __name__ == "__main__":
    main()
