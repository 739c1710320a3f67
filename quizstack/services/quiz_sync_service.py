"""
Quiz Sync Service
Persists editor drafts: create, load back for editing, and reconcile
an edited draft against the stored rows (deletes + upserts).
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from quizstack.errors import NotFoundError, QuizStackError, ValidationError
from quizstack.extensions import db
from quizstack.models import AnswerOption, Question, Quiz
from quizstack.services.quiz_draft import validate_draft

logger = logging.getLogger(__name__)


def _question_key(draft_question):
    """Saved questions are keyed by id, new ones by their temp id"""
    if draft_question.get('id'):
        return ('id', draft_question['id'])
    return ('temp', draft_question.get('temp_id'))


class QuizSyncService:
    """Draft <-> database reconciliation"""

    @staticmethod
    def _require_valid(draft):
        errors = validate_draft(draft)
        if errors:
            raise ValidationError('Quiz is not valid.', details={'errors': errors})

        keys = [_question_key(q) for q in draft['questions']]
        duplicates = sorted({key[1] for key in keys if keys.count(key) > 1}, key=str)
        if duplicates:
            raise ValidationError('Each question must appear only once.',
                                  details={'duplicates': duplicates})

    @staticmethod
    def create_quiz(draft, author=None):
        """Insert quiz, questions and options in one transaction"""
        QuizSyncService._require_valid(draft)

        quiz = Quiz(
            title=draft['title'].strip(),
            description=draft['description'].strip(),
            created_by=author.id if author else None,
        )
        for position, draft_question in enumerate(draft['questions']):
            question = Question(
                text=draft_question['text'].strip(),
                type=draft_question['type'],
                position=position,
            )
            for option_position, draft_option in enumerate(draft_question['options']):
                question.options.append(AnswerOption(
                    text=draft_option['text'].strip(),
                    is_correct=bool(draft_option['is_correct']),
                    position=option_position,
                ))
            quiz.questions.append(question)

        db.session.add(quiz)
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('Quiz creation failed: %s', exc)
            raise QuizStackError('Failed to create quiz.') from exc

        logger.info('Created quiz %s "%s" with %d questions',
                    quiz.id, quiz.title, len(quiz.questions))
        return quiz

    @staticmethod
    def load_draft(quiz_id):
        """Stored quiz as an editable draft, database ids kept"""
        quiz = db.session.get(Quiz, quiz_id)
        if not quiz:
            raise NotFoundError('Quiz not found.')

        return {
            'id': quiz.id,
            'title': quiz.title,
            'description': quiz.description,
            'questions': [
                {
                    'id': question.id,
                    'temp_id': index + 1,
                    'text': question.text,
                    'type': question.type,
                    'options': [
                        {'id': option.id, 'text': option.text, 'is_correct': option.is_correct}
                        for option in question.options
                    ],
                }
                for index, question in enumerate(quiz.questions)
            ],
        }

    @staticmethod
    def update_quiz(quiz_id, draft):
        """
        Reconcile an edited draft with the stored quiz.

        Questions/options whose ids are missing from the draft are
        deleted, the rest are updated in place, and rows without ids are
        inserted. New questions are matched to their rows through
        ``temp_id``. Returns a summary dict.
        """
        quiz = db.session.get(Quiz, quiz_id)
        if not quiz:
            raise NotFoundError('Quiz not found.')
        QuizSyncService._require_valid(draft)

        stored_questions = {q.id: q for q in quiz.questions}
        stored_options = {o.id: o for q in quiz.questions for o in q.options}

        current_question_ids = {q['id'] for q in draft['questions'] if q.get('id')}
        unknown = current_question_ids - set(stored_questions)
        if unknown:
            raise ValidationError('Question does not belong to this quiz.',
                                  details={'question_ids': sorted(unknown)})

        current_option_ids = set()
        for draft_question in draft['questions']:
            for draft_option in draft_question['options']:
                option_id = draft_option.get('id')
                if not option_id:
                    continue
                stored = stored_options.get(option_id)
                if stored is None or stored.question_id != draft_question.get('id'):
                    raise ValidationError('Answer option does not belong to this question.',
                                          details={'option_id': option_id})
                current_option_ids.add(option_id)

        deleted_question_ids = set(stored_questions) - current_question_ids
        deleted_option_ids = set(stored_options) - current_option_ids

        summary = {
            'quiz_id': quiz.id,
            'questions_deleted': len(deleted_question_ids),
            'options_deleted': 0,
            'questions_created': 0,
            'questions_updated': 0,
            'options_created': 0,
            'options_updated': 0,
        }

        try:
            # 1. Metadata
            quiz.title = draft['title'].strip()
            quiz.description = draft['description'].strip()

            # 2. Deletes (options of a deleted question go with it)
            for question_id in deleted_question_ids:
                quiz.questions.remove(stored_questions[question_id])
            for option_id in deleted_option_ids:
                option = stored_options[option_id]
                if option.question_id in deleted_question_ids:
                    continue
                stored_questions[option.question_id].options.remove(option)
                summary['options_deleted'] += 1

            # 3. Upsert questions
            question_map = {}
            for position, draft_question in enumerate(draft['questions']):
                if draft_question.get('id'):
                    question = stored_questions[draft_question['id']]
                    question.text = draft_question['text'].strip()
                    question.type = draft_question['type']
                    question.position = position
                    summary['questions_updated'] += 1
                else:
                    question = Question(
                        text=draft_question['text'].strip(),
                        type=draft_question['type'],
                        position=position,
                    )
                    quiz.questions.append(question)
                    summary['questions_created'] += 1
                question_map[_question_key(draft_question)] = question

            db.session.flush()

            # 4. Upsert options against the mapped questions
            for draft_question in draft['questions']:
                question = question_map[_question_key(draft_question)]
                for option_position, draft_option in enumerate(draft_question['options']):
                    if draft_option.get('id'):
                        option = stored_options[draft_option['id']]
                        option.text = draft_option['text'].strip()
                        option.is_correct = bool(draft_option['is_correct'])
                        option.position = option_position
                        summary['options_updated'] += 1
                    else:
                        question.options.append(AnswerOption(
                            text=draft_option['text'].strip(),
                            is_correct=bool(draft_option['is_correct']),
                            position=option_position,
                        ))
                        summary['options_created'] += 1

            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('Quiz %s update failed: %s', quiz_id, exc)
            raise QuizStackError('Failed to update quiz.') from exc

        logger.info('Updated quiz %s: %s', quiz_id, summary)
        return summary
