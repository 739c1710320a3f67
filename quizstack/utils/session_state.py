"""
Persisted Visitor State
Per-visitor slices (auth, quiz) kept in the Flask session.

Each slice is a plain dict changed only through its reducers. Before a
slice is written to the session the reconciler drops transient fields,
and on rehydration it resets them, so a stale "loading" or error message
never survives a round trip. Only whitelisted slices are reconciled.
"""
from flask import session

SESSION_KEY = 'quizstack_state'

AUTH = 'auth'
QUIZ = 'quiz'

TRANSIENT_FIELDS = ('loading', 'status', 'error', 'message')
RECONCILED_SLICES = (AUTH,)


def initial_auth_state():
    return {
        'status': 'idle',
        'session': None,
        'user': None,
        'is_authenticated': False,
        'error': None,
    }


def initial_quiz_state():
    return {
        'status': 'idle',
        'quiz_id': None,
        'current_index': 0,
        'answers': {},
        'attempt_id': None,
        'score': None,
        'total': None,
        'error': None,
    }


INITIAL_STATE = {
    AUTH: initial_auth_state,
    QUIZ: initial_quiz_state,
}


# ================= AUTH REDUCERS =================

def set_session(state, auth_session):
    new_state = dict(state)
    new_state['session'] = auth_session
    new_state['user'] = auth_session['user'] if auth_session else None
    new_state['status'] = 'succeeded'
    new_state['is_authenticated'] = auth_session is not None
    return new_state


def sign_out(state):
    return initial_auth_state()


# ================= QUIZ REDUCERS =================

def start_quiz(state, quiz_id):
    # Re-entering the quiz in progress keeps its answers
    if state.get('quiz_id') == quiz_id and state.get('status') == 'taking':
        return state
    new_state = initial_quiz_state()
    new_state['quiz_id'] = quiz_id
    new_state['status'] = 'taking'
    return new_state


def record_answer(state, question_id, value):
    new_state = dict(state)
    answers = dict(state.get('answers') or {})
    if value is None:
        answers.pop(str(question_id), None)
    else:
        answers[str(question_id)] = value
    new_state['answers'] = answers
    return new_state


def goto_question(state, index):
    new_state = dict(state)
    new_state['current_index'] = max(0, int(index))
    return new_state


def finish_quiz(state, score, total, attempt_id=None):
    new_state = dict(state)
    new_state['status'] = 'finished'
    new_state['score'] = score
    new_state['total'] = total
    new_state['attempt_id'] = attempt_id
    new_state['error'] = None
    return new_state


def fail_quiz(state, error):
    new_state = dict(state)
    new_state['status'] = 'error'
    new_state['error'] = error
    return new_state


def reset_quiz(state):
    return initial_quiz_state()


REDUCERS = {
    AUTH: {
        'set_session': set_session,
        'sign_out': sign_out,
    },
    QUIZ: {
        'start': start_quiz,
        'answer': record_answer,
        'goto': goto_question,
        'finish': finish_quiz,
        'fail': fail_quiz,
        'reset': reset_quiz,
    },
}


# ================= RECONCILER =================

def strip_transient(slice_state):
    """Inbound: remove transient fields before persisting"""
    if not slice_state:
        return slice_state
    return {k: v for k, v in slice_state.items() if k not in TRANSIENT_FIELDS}


def reset_transient(slice_state):
    """Outbound: transient fields come back in their resting values"""
    if not slice_state:
        return slice_state
    new_state = dict(slice_state)
    new_state.update({
        'loading': False,
        'status': 'idle',
        'error': None,
        'message': '',
    })
    return new_state


class StateStore:
    """Reads and writes the slices through a dict-like storage"""

    def __init__(self, storage, whitelist=RECONCILED_SLICES):
        self.storage = storage
        self.whitelist = tuple(whitelist)

    def get_state(self):
        persisted = self.storage.get(SESSION_KEY) or {}
        state = {}
        for name, factory in INITIAL_STATE.items():
            raw = persisted.get(name)
            if raw is None:
                state[name] = factory()
                continue
            slice_state = factory()
            slice_state.update(raw)
            if name in self.whitelist:
                slice_state = reset_transient(slice_state)
            state[name] = slice_state
        return state

    def dispatch(self, slice_name, action, *args):
        reducer = REDUCERS[slice_name][action]
        state = self.get_state()
        state[slice_name] = reducer(state[slice_name], *args)
        self._persist(state)
        return state[slice_name]

    def _persist(self, state):
        persisted = {}
        for name, slice_state in state.items():
            if name in self.whitelist:
                slice_state = strip_transient(slice_state)
            persisted[name] = slice_state
        self.storage[SESSION_KEY] = persisted
        if hasattr(self.storage, 'modified'):
            self.storage.modified = True

    def purge(self):
        self.storage.pop(SESSION_KEY, None)


def get_store():
    """State store bound to the current request's session"""
    return StateStore(session)
