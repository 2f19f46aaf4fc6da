from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class User(db.Model):
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)
    role = db.Column(db.String(20), nullable=False)
    avatar = db.Column(db.String(255))
    created_at = db.Column(db.String(40))
    updated_at = db.Column(db.String(40))

    # Relationship: a candidate can have many applications
    applications = db.relationship("Application", backref="user", lazy=True)
    # Relationship: an employer can post many jobs
    jobs_posted = db.relationship("Job", backref="employer", lazy=True)


class Job(db.Model):
    __tablename__ = "job"

    id = db.Column(db.Integer, primary_key=True)
    posted_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    company = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(100))
    description = db.Column(db.Text, nullable=False)
    requirements = db.Column(db.JSON)
    skills = db.Column(db.JSON)
    salary = db.Column(db.String(100))
    status = db.Column(db.String(20), nullable=False, default="active")
    created_at = db.Column(db.String(40), nullable=False)
    updated_at = db.Column(db.String(40))

    # Deleting a job removes its applications
    applications = db.relationship(
        "Application", backref="job", lazy=True, cascade="all, delete-orphan"
    )


class Application(db.Model):
    __tablename__ = "application"
    __table_args__ = (
        db.UniqueConstraint("user_id", "job_id", name="uq_application_user_job"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    job_id = db.Column(db.Integer, db.ForeignKey("job.id"), nullable=False)
    resume = db.Column(db.Text, nullable=False)
    cover_letter = db.Column(db.Text)
    score = db.Column(db.Integer)
    matching_keywords = db.Column(db.JSON)
    status = db.Column(db.String(20), nullable=False, default="applied")
    # JSON-encoded resume feedback
    feedback = db.Column(db.Text)
    applied_at = db.Column(db.String(40), nullable=False)
    updated_at = db.Column(db.String(40))


TABLES = {
    User.__tablename__: User,
    Job.__tablename__: Job,
    Application.__tablename__: Application,
}
