"""
Quiz Draft
Editor state for creating/editing a quiz, changed only through reducers.

A draft is a plain dict:
    {'id', 'title', 'description', 'questions': [
        {'id', 'temp_id', 'text', 'type', 'options': [
            {'id', 'text', 'is_correct'}, ...]}, ...]}

``id`` is the database id (None until saved); ``temp_id`` keys questions
that have not been saved yet. Reducers never mutate their input.
"""
import copy

from quizstack.errors import ValidationError
from quizstack.models.question import (
    QUESTION_TYPES,
    SINGLE_CHOICE,
    TEXT,
    TRUE_FALSE,
)

MIN_CHOICE_OPTIONS = 2


def _option(text='', is_correct=False, option_id=None):
    return {'id': option_id, 'text': text, 'is_correct': is_correct}


def default_options(question_type):
    """Options a question gets when created or when its type changes"""
    if question_type == SINGLE_CHOICE:
        return [_option('Option 1', True), _option('Option 2', False)]
    if question_type == TRUE_FALSE:
        return [_option('True', True), _option('False', False)]
    if question_type == TEXT:
        return [_option('', True)]
    raise ValidationError(f'Unknown question type: {question_type}')


def _blank_question(temp_id):
    return {
        'id': None,
        'temp_id': temp_id,
        'text': '',
        'type': SINGLE_CHOICE,
        'options': [_option('', True), _option('', False)],
    }


def next_temp_id(draft):
    temp_ids = [q.get('temp_id') or 0 for q in draft['questions']]
    return max(temp_ids, default=0) + 1


def _question_at(draft, q_index):
    if not 0 <= q_index < len(draft['questions']):
        raise ValidationError('Unknown question.')
    return draft['questions'][q_index]


def _option_at(question, o_index):
    if not 0 <= o_index < len(question['options']):
        raise ValidationError('Unknown answer option.')
    return question['options'][o_index]


# ================= REDUCERS =================

def new_draft():
    return {
        'id': None,
        'title': '',
        'description': '',
        'questions': [_blank_question(1)],
    }


def update_details(draft, title=None, description=None):
    new = copy.deepcopy(draft)
    if title is not None:
        new['title'] = title
    if description is not None:
        new['description'] = description
    return new


def add_question(draft):
    new = copy.deepcopy(draft)
    new['questions'].append(_blank_question(next_temp_id(draft)))
    return new


def remove_question(draft, q_index):
    _question_at(draft, q_index)
    if len(draft['questions']) <= 1:
        raise ValidationError('A quiz must have at least one question.')
    new = copy.deepcopy(draft)
    del new['questions'][q_index]
    return new


def update_question(draft, q_index, changes):
    question = _question_at(draft, q_index)
    new = copy.deepcopy(draft)
    updated = dict(new['questions'][q_index])
    updated.update(copy.deepcopy(changes))

    new_type = changes.get('type')
    if new_type and new_type != question['type']:
        if new_type not in QUESTION_TYPES:
            raise ValidationError(f'Unknown question type: {new_type}')
        updated['options'] = default_options(new_type)

    new['questions'][q_index] = updated
    return new


def add_option(draft, q_index):
    _question_at(draft, q_index)
    new = copy.deepcopy(draft)
    new['questions'][q_index]['options'].append(_option())
    return new


def remove_option(draft, q_index, o_index):
    question = _question_at(draft, q_index)
    _option_at(question, o_index)
    if len(question['options']) <= MIN_CHOICE_OPTIONS:
        return draft

    new = copy.deepcopy(draft)
    options = new['questions'][q_index]['options']
    del options[o_index]
    if not any(o['is_correct'] for o in options):
        options[0]['is_correct'] = True
    return new


def update_option(draft, q_index, o_index, changes):
    question = _question_at(draft, q_index)
    _option_at(question, o_index)
    new = copy.deepcopy(draft)

    options = []
    for j, option in enumerate(new['questions'][q_index]['options']):
        if j == o_index:
            option = dict(option, **changes)
        elif changes.get('is_correct') is True:
            # single correct answer per question
            option = dict(option, is_correct=False)
        options.append(option)

    new['questions'][q_index]['options'] = options
    return new


# ================= VALIDATION =================

def validate_draft(draft):
    """Return a list of problems; empty means the draft can be saved"""
    errors = []

    if not (draft.get('title') or '').strip():
        errors.append('Title is required.')
    if not (draft.get('description') or '').strip():
        errors.append('Description is required.')

    questions = draft.get('questions') or []
    if not questions:
        errors.append('A quiz must have at least one question.')

    for number, question in enumerate(questions, 1):
        label = f'Question {number}'
        options = question.get('options') or []
        correct = [o for o in options if o.get('is_correct')]
        qtype = question.get('type')

        if not (question.get('text') or '').strip():
            errors.append(f'{label}: question text is required.')

        if qtype == SINGLE_CHOICE:
            if len(options) < MIN_CHOICE_OPTIONS:
                errors.append(f'{label}: needs at least two options.')
            if any(not (o.get('text') or '').strip() for o in options):
                errors.append(f'{label}: every option needs text.')
            if len(correct) != 1:
                errors.append(f'{label}: mark exactly one correct option.')
        elif qtype == TRUE_FALSE:
            if len(options) != 2:
                errors.append(f'{label}: a true/false question needs exactly two options.')
            if len(correct) != 1:
                errors.append(f'{label}: mark exactly one correct option.')
        elif qtype == TEXT:
            if len(options) != 1:
                errors.append(f'{label}: a text question takes exactly one expected answer.')
        else:
            errors.append(f'{label}: unknown question type.')

    return errors


def is_valid(draft):
    return not validate_draft(draft)


# ================= PARSING =================

def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'on', 'yes')
    return bool(value)


def draft_from_form(form):
    """
    Rebuild a draft from the editor form.

    Field names: title, description, question_{i}, question_id_{i},
    temp_id_{i}, previous_type_{i}, question_type_{i}, option_{i}_{j},
    option_id_{i}_{j}, correct_{i} (index of the checked radio).
    A changed question_type_{i} goes through update_question so the
    options reset exactly as they do when the type is switched.
    """
    draft = {
        'id': _to_int(form.get('quiz_id')),
        'title': form.get('title', ''),
        'description': form.get('description', ''),
        'questions': [],
    }
    type_changes = []

    i = 0
    while f'question_{i}' in form:
        requested_type = form.get(f'question_type_{i}') or SINGLE_CHOICE
        qtype = form.get(f'previous_type_{i}') or requested_type
        if qtype not in QUESTION_TYPES:
            qtype = SINGLE_CHOICE

        options = []
        j = 0
        while f'option_{i}_{j}' in form:
            options.append(_option(
                form.get(f'option_{i}_{j}', ''),
                qtype == TEXT,
                _to_int(form.get(f'option_id_{i}_{j}')),
            ))
            j += 1

        draft['questions'].append({
            'id': _to_int(form.get(f'question_id_{i}')),
            'temp_id': _to_int(form.get(f'temp_id_{i}')),
            'text': form.get(f'question_{i}', ''),
            'type': qtype,
            'options': options,
        })

        correct_index = _to_int(form.get(f'correct_{i}'))
        if qtype != TEXT and correct_index is not None and 0 <= correct_index < len(options):
            draft = update_option(draft, i, correct_index, {'is_correct': True})

        if requested_type != qtype:
            type_changes.append((i, requested_type))
        i += 1

    for question in draft['questions']:
        if question['temp_id'] is None:
            question['temp_id'] = next_temp_id(draft)

    for q_index, requested_type in type_changes:
        draft = update_question(draft, q_index, {'type': requested_type})

    return draft


def draft_from_payload(payload):
    """Normalize a JSON body into a draft"""
    if not isinstance(payload, dict):
        raise ValidationError('Quiz payload must be an object.')

    questions_in = payload.get('questions')
    if not isinstance(questions_in, list):
        raise ValidationError('Quiz payload needs a questions list.')

    draft = {
        'id': _to_int(payload.get('id')),
        'title': str(payload.get('title') or ''),
        'description': str(payload.get('description') or ''),
        'questions': [],
    }
    for raw in questions_in:
        if not isinstance(raw, dict):
            raise ValidationError('Each question must be an object.')
        options = [
            _option(
                str(o.get('text') or ''),
                _to_bool(o.get('is_correct')),
                _to_int(o.get('id')),
            )
            for o in (raw.get('options') or [])
            if isinstance(o, dict)
        ]
        draft['questions'].append({
            'id': _to_int(raw.get('id')),
            'temp_id': _to_int(raw.get('temp_id') or raw.get('tempId')),
            'text': str(raw.get('text') or ''),
            'type': raw.get('type') or SINGLE_CHOICE,
            'options': options,
        })

    for question in draft['questions']:
        if question['temp_id'] is None:
            question['temp_id'] = next_temp_id(draft)
    return draft


def apply_action(draft, action):
    """
    Apply an editor button to the draft.

    Actions: add_question, remove_question:i, add_option:i,
    remove_option:i:j, refresh.
    """
    name, _, args = (action or 'refresh').partition(':')
    params = [_to_int(part) for part in args.split(':')] if args else []
    if any(p is None for p in params):
        raise ValidationError(f'Unknown editor action: {action}')

    if name == 'add_question' and not params:
        return add_question(draft)
    if name == 'remove_question' and len(params) == 1:
        return remove_question(draft, params[0])
    if name == 'add_option' and len(params) == 1:
        return add_option(draft, params[0])
    if name == 'remove_option' and len(params) == 2:
        return remove_option(draft, params[0], params[1])
    if name == 'refresh' and not params:
        return draft
    raise ValidationError(f'Unknown editor action: {action}')
