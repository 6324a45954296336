"""
CloudMentor - AWS Certification Learning Platform

Streamlit application with courses, assessments, an AI mentor,
progress tracking and study groups.

Usage:
    python scripts/seed_catalog.py
    streamlit run app.py
"""

import streamlit as st

from cloudmentor.classroom import (
    AssessmentSession,
    AttemptState,
    CourseCatalog,
    LessonNavigator,
    ProgressAggregator,
)
from cloudmentor.collaboration import RoomManager, invite_link
from cloudmentor.config import load_settings, setup_logging
from cloudmentor.context import SessionContext
from cloudmentor.errors import CloudMentorError, NotFoundError, TransportError, ValidationError
from cloudmentor.gateway import SQLiteGateway, Tables
from cloudmentor.mentor import MentorClient, MentorSession, transcribe_audio
from cloudmentor.schemas import CourseLevel, QuestionType
from cloudmentor.viewer import (
    course_progress_frame,
    get_quiz_css,
    option_labels,
    render_achievements,
    render_course_line,
    render_level_badge,
    render_question,
    render_result,
    render_stat_card,
    score_trend_frame,
    selected_option_index,
)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

PAGES = ["Dashboard", "Courses", "Assessments", "Mentor", "Progress", "Study Groups"]
APP_BASE_URL = "http://localhost:8501"

st.set_page_config(
    page_title="CloudMentor",
    page_icon="☁️",
    layout="wide",
    initial_sidebar_state="expanded",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "settings" not in st.session_state:
        st.session_state.settings = load_settings()
        setup_logging(st.session_state.settings.log_level)

    settings = st.session_state.settings

    if "gateway" not in st.session_state:
        st.session_state.gateway = SQLiteGateway(settings.db_path)

    if "context" not in st.session_state:
        user = Tables.from_gateway(st.session_state.gateway).users.get_or_none(id=settings.user_id)
        st.session_state.context = SessionContext(
            user_id=settings.user_id,
            email=user.email if user else None,
            full_name=user.full_name if user else None,
        )

    if "page" not in st.session_state:
        st.session_state.page = "Dashboard"

    if "mentor" not in st.session_state:
        try:
            client = MentorClient(
                api_key=settings.gemini_api_key,
                model=settings.model,
                temperature=settings.temperature,
            )
            st.session_state.mentor = MentorSession(client)
        except ValueError:
            st.session_state.mentor = None

    for key in ("course_id", "lesson_id", "attempt"):
        if key not in st.session_state:
            st.session_state[key] = None


def catalog() -> CourseCatalog:
    return CourseCatalog(st.session_state.gateway, st.session_state.context)


def aggregator() -> ProgressAggregator:
    return ProgressAggregator(st.session_state.gateway, st.session_state.context)


def rooms() -> RoomManager:
    return RoomManager(st.session_state.gateway, st.session_state.context)


def go_to(page: str, **state):
    st.session_state.page = page
    for key, value in state.items():
        st.session_state[key] = value
    st.rerun()


# -----------------------------------------------------------------------------
# Sidebar
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with navigation and headline progress."""
    st.sidebar.title("☁️ CloudMentor")
    st.sidebar.caption(f"Signed in as {st.session_state.context.display_name}")

    page = st.sidebar.radio(
        "Navigate",
        PAGES,
        index=PAGES.index(st.session_state.page),
        label_visibility="collapsed",
    )
    if page != st.session_state.page:
        st.session_state.page = page
        st.session_state.course_id = None
        st.session_state.lesson_id = None
        st.session_state.attempt = None

    st.sidebar.divider()
    stats = aggregator().get_dashboard_stats()
    st.sidebar.markdown(
        f"**{stats.courses_enrolled}** courses · **{stats.assessments_passed}** passed · "
        f"**{stats.current_streak}** day streak"
    )


# -----------------------------------------------------------------------------
# Dashboard
# -----------------------------------------------------------------------------

def render_dashboard():
    st.title(f"Welcome back, {st.session_state.context.display_name}")
    st.caption("Continue your AWS learning journey with CloudMentor AI")

    stats = aggregator().get_dashboard_stats()
    cols = st.columns(4)
    cards = [
        ("Courses Enrolled", stats.courses_enrolled),
        ("Assessments Passed", stats.assessments_passed),
        ("Points Earned", stats.points_earned),
        ("Current Streak", stats.current_streak),
    ]
    for col, (label, value) in zip(cols, cards):
        col.markdown(render_stat_card(label, value), unsafe_allow_html=True)

    st.divider()
    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Recommended Courses")
        for course in catalog().list_courses()[:3]:
            lessons, hours = catalog().get_course_duration(course.id)
            st.markdown(render_course_line(course, lessons, hours), unsafe_allow_html=True)
        if st.button("Browse courses"):
            go_to("Courses")
    with col2:
        st.subheader("AI Mentor")
        st.markdown("Ask your AI mentor about EC2, IAM, VPC design or exam preparation.")
        if st.button("Start a mentoring session"):
            go_to("Mentor")


# -----------------------------------------------------------------------------
# Courses
# -----------------------------------------------------------------------------

def render_courses_view():
    if st.session_state.lesson_id:
        render_lesson_view()
    elif st.session_state.course_id:
        render_course_detail()
    else:
        render_course_list()


def render_course_list():
    st.title("Courses")
    st.caption("Master AWS with certification-aligned courses")

    level = st.radio(
        "Level",
        ["all"] + [level.value for level in CourseLevel],
        horizontal=True,
        format_func=lambda v: "All Paths" if v == "all" else v.title(),
    )
    cat = catalog()
    courses = cat.list_courses(level=None if level == "all" else level)
    enrolled = cat.get_enrolled_course_ids()

    if not courses:
        st.info("No courses available yet.")
        return

    cols = st.columns(3)
    for idx, course in enumerate(courses):
        with cols[idx % 3].container(border=True):
            lessons, hours = cat.get_course_duration(course.id)
            st.markdown(render_level_badge(course.level.value), unsafe_allow_html=True)
            st.subheader(course.title)
            st.write(course.description)
            st.caption(f"{lessons} lessons · {hours} hours")
            if course.id in enrolled:
                if st.button("Continue Learning", key=f"open_{course.id}", use_container_width=True):
                    go_to("Courses", course_id=course.id)
            else:
                if st.button("Enroll Now", key=f"enroll_{course.id}", type="primary", use_container_width=True):
                    enroll(course.id)
                if st.button("Preview Course", key=f"preview_{course.id}", use_container_width=True):
                    go_to("Courses", course_id=course.id)


def enroll(course_id: str):
    try:
        catalog().enroll(course_id)
    except CloudMentorError as e:
        st.error(f"Enrollment failed: {e}")
        return
    st.rerun()


def render_course_detail():
    cat = catalog()
    try:
        course = cat.get_course(st.session_state.course_id)
    except NotFoundError:
        st.error("Course not found.")
        return

    if st.button("← All courses"):
        go_to("Courses", course_id=None)

    st.title(course.title)
    st.write(course.description)

    enrollment = cat.get_enrollment(course.id)
    col1, col2, col3 = st.columns(3)
    col1.metric("Category", course.category or "-")
    col2.metric("Duration", f"{course.estimated_duration_hours:g}h")
    col3.metric("Status", "Enrolled" if enrollment else "Not Enrolled")

    if enrollment:
        st.progress(enrollment.progress_percentage / 100,
                    text=f"{enrollment.lessons_completed}/{enrollment.total_lessons} lessons completed")
    elif st.button("Enroll Now", type="primary"):
        enroll(course.id)

    st.subheader("Lessons")
    lessons = cat.get_lessons(course.id)
    if not lessons:
        st.info("No lessons available yet")
    for lesson in lessons:
        col1, col2 = st.columns([9, 1])
        with col1:
            st.markdown(f"**{lesson.order}. {lesson.title}**")
            st.caption(lesson.content[:100] + "...")
        with col2:
            if enrollment and st.button("Learn", key=f"learn_{lesson.id}"):
                go_to("Courses", lesson_id=lesson.id)


def render_lesson_view():
    """Render a lesson with prev/next navigation and completion toggle."""
    cat = catalog()
    course_id = st.session_state.course_id
    nav = LessonNavigator(cat.get_lessons(course_id))
    lesson = nav.get_lesson(st.session_state.lesson_id)
    if lesson is None:
        st.error("Lesson not found.")
        return

    if st.button("← Back to course"):
        go_to("Courses", lesson_id=None)

    pos, total = nav.get_lesson_position(lesson.id)
    st.caption(f"Lesson {pos} of {total}")
    st.progress(nav.get_progress_fraction(lesson.id))
    st.title(lesson.title)

    if lesson.video_url:
        st.video(lesson.video_url)
    st.markdown(lesson.content)

    if lesson.resources:
        st.subheader("Resources")
        for resource in lesson.resources:
            st.markdown(f"📎 {resource}")

    render_completion_section(course_id, lesson.id)
    render_navigation_bar(nav, lesson.id)


def render_completion_section(course_id: str, lesson_id: str):
    completed_key = f"completed_{lesson_id}"
    completed = st.session_state.get(completed_key, False)

    st.divider()
    try:
        if completed:
            st.success("Lesson complete")
            if st.button("Mark as incomplete"):
                catalog().unmark_lesson_complete(course_id)
                st.session_state[completed_key] = False
                st.rerun()
        elif st.button("Mark as Complete", type="primary", use_container_width=True):
            catalog().mark_lesson_complete(course_id)
            st.session_state[completed_key] = True
            st.rerun()
    except NotFoundError:
        st.warning("Enroll in this course to track your progress.")


def render_navigation_bar(nav: LessonNavigator, lesson_id: str):
    """Render navigation bar with prev/next buttons."""
    prev_id = nav.get_previous_lesson_id(lesson_id)
    next_id = nav.get_next_lesson_id(lesson_id)

    col1, _, col3 = st.columns([1, 2, 1])
    with col1:
        if prev_id and st.button("← Previous", use_container_width=True):
            go_to("Courses", lesson_id=prev_id)
    with col3:
        if next_id and st.button("Next →", use_container_width=True):
            go_to("Courses", lesson_id=next_id)


# -----------------------------------------------------------------------------
# Assessments
# -----------------------------------------------------------------------------

def render_assessments_view():
    if st.session_state.attempt is not None:
        render_attempt(st.session_state.attempt)
        return

    st.title("Assessments")
    st.caption("Take quizzes and assessments to test your AWS knowledge")

    overviews = aggregator().get_assessment_overviews()
    if not overviews:
        st.info("No assessments available yet. Enroll in a course to access assessments.")
        return

    for overview in overviews:
        with st.container(border=True):
            col1, col2 = st.columns([4, 1])
            with col1:
                icon = "✅" if overview.is_completed else "📝"
                st.markdown(f"{icon} **{overview.title}**")
                st.caption(overview.course_title)
            with col2:
                label = "Retake" if overview.is_completed else "Take Assessment"
                if st.button(label, key=f"take_{overview.assessment_id}", use_container_width=True):
                    start_attempt(overview.assessment_id)

            c1, c2, c3 = st.columns(3)
            c1.metric("Best Score", f"{overview.best_score}%")
            c2.metric("Attempts", overview.total_attempts)
            c3.metric("Passed", overview.passed_count)
            st.progress(overview.best_score / 100,
                        text=f"{overview.best_score}% Complete" if overview.best_score else "Not Started")
            if overview.last_attempt:
                st.caption(f"Last attempt: {overview.last_attempt:%Y-%m-%d}")


def start_attempt(assessment_id: str):
    attempt = AssessmentSession(st.session_state.gateway, st.session_state.context)
    try:
        attempt.load(assessment_id)
    except CloudMentorError as e:
        st.error(f"Assessment unavailable: {e}")
        return
    st.session_state.attempt = attempt
    st.rerun()


def render_attempt(attempt: AssessmentSession):
    st.markdown(get_quiz_css(), unsafe_allow_html=True)
    st.title(attempt.assessment.title)

    if attempt.state == AttemptState.SUBMITTED:
        st.markdown(
            render_result(attempt.score, attempt.passed, attempt.passing_score,
                          attempt.answered_count, len(attempt.questions)),
            unsafe_allow_html=True,
        )
        if st.button("Back to assessments"):
            go_to("Assessments", attempt=None)
        return

    question = attempt.current_question
    pos, total = attempt.position
    st.markdown(render_question(question, pos, total), unsafe_allow_html=True)

    answer = attempt.answers.get(question.id)
    if question.question.question_type == QuestionType.MULTIPLE_CHOICE:
        labels = option_labels(question)
        choice = st.radio(
            "Select an answer",
            list(labels),
            index=selected_option_index(question, answer),
            format_func=labels.get,
            key=f"answer_{question.id}",
        )
        if choice:
            attempt.select_answer(question.id, choice)
    else:
        text = st.text_area("Your answer", value=answer or "", key=f"answer_{question.id}")
        attempt.select_answer(question.id, text)

    col1, col2, col3 = st.columns([1, 2, 1])
    with col1:
        if st.button("← Previous", disabled=attempt.is_first, use_container_width=True):
            attempt.retreat()
            st.rerun()
    with col2:
        st.caption(f"{attempt.answered_count} of {total} answered")
    with col3:
        if attempt.is_last:
            if st.button("Submit", type="primary", disabled=not attempt.is_complete,
                         use_container_width=True):
                submit_attempt(attempt)
        elif st.button("Next →", use_container_width=True):
            attempt.advance()
            st.rerun()


def submit_attempt(attempt: AssessmentSession):
    try:
        attempt.submit()
    except CloudMentorError as e:
        st.error(f"Could not save your result: {e}")
        return
    st.rerun()


# -----------------------------------------------------------------------------
# Mentor
# -----------------------------------------------------------------------------

def render_mentor_view():
    st.title("AI Mentor")
    st.caption("Ask your AWS expert questions and get personalized guidance")

    mentor = st.session_state.mentor
    if mentor is None:
        st.error("The AI mentor is not configured. Set GEMINI_API_KEY in your .env file.")
        return

    for message in mentor.transcript:
        with st.chat_message(message.role):
            st.markdown(message.content)

    recording = st.audio_input("Ask by voice")
    if recording is not None and st.button("Transcribe question"):
        try:
            result = transcribe_audio(recording.getvalue(), mentor.client)
            st.session_state.voice_question = result.text
        except CloudMentorError as e:
            st.error(f"Transcription failed: {e}")

    question = st.chat_input("Ask your AI mentor a question...")
    question = question or st.session_state.pop("voice_question", None)
    if not question:
        return

    with st.chat_message("user"):
        st.markdown(question)
    with st.chat_message("assistant"):
        try:
            st.write_stream(mentor.ask(question))
        except ValidationError as e:
            st.warning(str(e))
        except TransportError:
            st.error("The mentor stopped responding. Your partial answer is kept above; try again.")


# -----------------------------------------------------------------------------
# Progress
# -----------------------------------------------------------------------------

def render_progress_view():
    st.title("Progress")
    st.caption("Track your learning journey and achievements")

    summary = aggregator().get_summary()
    cols = st.columns(4)
    cards = [
        ("Courses Enrolled", summary.enrolled_count),
        ("Lessons Completed", summary.completed_lessons),
        ("Assessments Passed", summary.passed_count),
        ("Total Points", summary.total_points),
    ]
    for col, (label, value) in zip(cols, cards):
        col.markdown(render_stat_card(label, value), unsafe_allow_html=True)
    st.caption(f"Average score: {summary.average_score}%")

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Course Progress")
        if summary.course_progress:
            st.bar_chart(course_progress_frame(summary))
        else:
            st.info("No course data yet")
    with col2:
        st.subheader("Assessment Scores")
        if summary.recent_scores:
            st.line_chart(score_trend_frame(summary))
        else:
            st.info("No assessment data yet")

    st.subheader("Your Level & Achievements")
    if summary.gamification:
        st.markdown(render_achievements(summary.gamification), unsafe_allow_html=True)
    else:
        st.info("Start learning to earn badges and level up!")


# -----------------------------------------------------------------------------
# Study Groups
# -----------------------------------------------------------------------------

def render_study_groups_view():
    st.title("Study Groups")
    st.caption("Learn together with other AWS learners")
    manager = rooms()

    with st.form("create_room", clear_on_submit=True):
        name = st.text_input("Study group name", placeholder="e.g. AWS Study Group")
        if st.form_submit_button("Create study group"):
            try:
                manager.create_room(name)
                st.success("Study group created")
            except ValidationError as e:
                st.error(str(e))
            except CloudMentorError:
                st.error("Room created but failed to join. Please try again.")

    room_list = manager.list_rooms()
    if not room_list:
        st.info("No study groups yet. Create one to get started.")
        return

    for room in room_list:
        with st.container(border=True):
            st.subheader(room.title)
            st.caption(f"{room.topic} · {len(manager.list_members(room.id))} members")
            st.code(invite_link(APP_BASE_URL, room.id), language=None)
            email = st.text_input("Invite by email", key=f"invite_{room.id}")
            if st.button("Send invite", key=f"send_{room.id}") and email:
                manager.invite_by_email(room.id, email)
                st.rerun()


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

VIEWS = {
    "Dashboard": render_dashboard,
    "Courses": render_courses_view,
    "Assessments": render_assessments_view,
    "Mentor": render_mentor_view,
    "Progress": render_progress_view,
    "Study Groups": render_study_groups_view,
}


def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()
    VIEWS[st.session_state.page]()


if __name__ == "__main__":
    main()
