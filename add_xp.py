"""
Script to grant corrective XP to a student account
Usage: python add_xp.py <student_id> <xp>
Example: python add_xp.py s1024 100
"""
import sys

from scilingo import create_app, db
from scilingo.models.user import User
from scilingo.services.scoring_service import ScoringService
from scilingo.services.session_service import SessionService


def add_xp(student_number, xp):
    """Add XP to a student's aggregate stats and recompute the level"""
    app = create_app()

    with app.app_context():
        user = User.query.filter_by(student_number=student_number).first()

        if not user:
            print(f"Error: student '{student_number}' not found")
            return False

        if user.role != 'student':
            print(f"Error: '{student_number}' is not a student (role={user.role})")
            return False

        stats = SessionService.get_or_create_stats(user.id, lock=True)
        before = stats.xp or 0
        stats.xp = before + xp
        stats.level = ScoringService.level_for_xp(stats.xp).level
        db.session.commit()

        print(f"{user.name}: {before} XP -> {stats.xp} XP (level {stats.level})")
        return True


if __name__ == '__main__':
    if len(sys.argv) != 3:
        print("Usage: python add_xp.py <student_id> <xp>")
        print("Example: python add_xp.py s1024 100")
        sys.exit(1)

    student_number = sys.argv[1]
    try:
        xp = int(sys.argv[2])
    except ValueError:
        print("Error: XP must be an integer")
        sys.exit(1)

    if xp <= 0:
        print("Error: XP must be greater than 0")
        sys.exit(1)

    success = add_xp(student_number, xp)
    sys.exit(0 if success else 1)
