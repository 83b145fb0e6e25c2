import sys

from app import app
from curriculum import ContentCheckError
from seeding import CONTENT_SEED_VERSION, ensure_content_seeded


# ----------------------------
# Main
# ----------------------------
def main():
    print(f"Seeding content v{CONTENT_SEED_VERSION} into {app.config['SQLALCHEMY_DATABASE_URI']}...")
    with app.app_context():
        try:
            ensure_content_seeded()
        except ContentCheckError as exc:
            print(exc, file=sys.stderr)
            return 1
    print("Seeded content.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
