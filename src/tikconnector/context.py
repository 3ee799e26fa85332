"""
The stack of active sessions of the calling thread.

Sessions push themselves when created and pop themselves when disposed. Entities and lists created
without an explicit session use the top of the stack. Each thread sees its own stack; a session must not
be handed to another thread, or to another asyncio task sharing the thread.
"""
import logging
import threading

logger = logging.getLogger(__name__)

_local = threading.local()


class SessionError(Exception):
    """ base class for session lifecycle errors. """


class SessionStackError(SessionError):
    """ A session was disposed out of creation order, or in a thread where it is not active. """


class NoActiveSessionError(SessionError):
    """ No session was given and none is active in the calling thread. """


def _sessions():
    stack = getattr(_local, 'sessions', None)
    if stack is None:
        stack = _local.sessions = []
    return stack


def active_session():
    """ :return: the most recently created, not yet disposed session of this thread, or None. """
    stack = _sessions()
    return stack[-1] if stack else None


def push_session(session):
    stack = _sessions()
    stack.append(session)
    logger.debug("session pushed, %d active in thread %s", len(stack), threading.current_thread().name)


def pop_session(session):
    """
    Removes the session from the top of the stack.
    Raises SessionStackError when the stack is empty or the session is not on top.
    """
    stack = _sessions()
    if not stack:
        raise SessionStackError("no active session in thread %s" % threading.current_thread().name)
    if stack[-1] is not session:
        raise SessionStackError("%r is not the active session; sessions must be disposed "
                                "in the reverse order of their creation" % session)
    stack.pop()
    logger.debug("session popped, %d active in thread %s", len(stack), threading.current_thread().name)


def resolve_session(session=None):
    """ :return: the given session, or the active one. Raises NoActiveSessionError if there is neither. """
    if session is not None:
        return session
    session = active_session()
    if session is None:
        raise NoActiveSessionError("no session given and no session is active in this thread")
    return session
