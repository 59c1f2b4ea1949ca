"""
Initialize database and create demo users
"""
from scilingo import create_app, db
from scilingo.models.question import Question
from scilingo.models.student_stats import StudentStats
from scilingo.models.topic import Topic
from scilingo.models.user import User

DEMO_QUESTIONS = [
    ("What is the smallest unit of an element that keeps its properties?",
     "Molecule", "Atom", "Cell", "Proton", "b",
     "An atom is the smallest unit of an element.", "Think about what the periodic table lists."),
    ("Which particle has a negative charge?",
     "Proton", "Neutron", "Electron", "Nucleus", "c",
     "Electrons carry a negative charge.", None),
    ("What happens to particles when a substance is heated?",
     "They move faster", "They stop moving", "They shrink", "They disappear", "a",
     "Adding thermal energy increases particle motion.", "Heat is a form of energy."),
]


def init_database():
    """Initialize database and create tables"""
    app = create_app()

    with app.app_context():
        print("Creating database tables...")
        db.create_all()

        teacher = User.query.filter_by(email='teacher@scilingo.app').first()
        if not teacher:
            print("Creating teacher user...")
            teacher = User(email='teacher@scilingo.app', name='Ms. Rivera', role='teacher')
            teacher.set_password('teacher123')  # Change this in production!
            db.session.add(teacher)
            db.session.flush()

        students = [
            ('s1001', 'Maya', '8A'),
            ('s1002', 'Leo', '8A'),
            ('s1003', 'Ava', '8B'),
        ]
        domain = app.config['STUDENT_EMAIL_DOMAIN']

        for student_number, name, section in students:
            if User.query.filter_by(student_number=student_number).first():
                continue
            print(f"Creating student: {student_number}...")
            student = User(
                email=f'{student_number}@{domain}',
                name=name,
                role='student',
                class_section=section,
                student_number=student_number
            )
            student.set_password('student123')  # Change this in production!
            db.session.add(student)
            db.session.flush()
            db.session.add(StudentStats(
                user_id=student.id, xp=0, xp_spent=0, level=1,
                streak_weeks=0, overall_accuracy=0, total_sessions=0
            ))

        if not Topic.query.first():
            print("Creating demo topic...")
            topic = Topic(title='Atoms and Molecules', standard='MS-PS1-1', week_number=1,
                          description='Matter is made of atoms that combine into molecules.',
                          is_active=True, created_by=teacher.id)
            db.session.add(topic)
            db.session.flush()
            for index, row in enumerate(DEMO_QUESTIONS):
                text, a, b, c, d, correct, explanation, hint = row
                db.session.add(Question(
                    topic_id=topic.id, question_text=text, option_a=a, option_b=b, option_c=c,
                    option_d=d, correct_option=correct, explanation=explanation, hint=hint,
                    order_index=index
                ))

        db.session.commit()
        print("\nDatabase initialized successfully!")
        print("Teacher: teacher@scilingo.app / teacher123")
        print("Students: s1001, s1002, s1003 / student123")
        print("\nIMPORTANT: Change these passwords in production!")


if __name__ == '__main__':
    init_database()
