import sys

from curriculum import run_content_checks


# ----------------------------
# Main
# ----------------------------
def main():
    issues = run_content_checks()
    if not issues:
        print("Content check passed.")
        return 0

    for issue in issues:
        print(f"Day {issue['day']}: {' '.join(issue['issues'])}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
