import pytest

import msgchannel
from msgchannel.protocol import factory
from msgchannel.protocol.message import Envelope, ErrorInfo, is_id


def test_classification():

    assert Envelope(id=0, name=None).is_response()
    assert Envelope(id=12, name=None, error=ErrorInfo('K', 'm')).is_rejection()

    assert not Envelope(id=None, name='note').is_response()
    assert not Envelope(id=3, name='request').is_response()
    assert not Envelope(id=None, name=None).is_response()
    assert not Envelope(id=0, name=None).is_rejection()


def test_is_id():

    assert is_id(0)
    assert is_id(2 ** 40)
    assert not is_id(-1)
    assert not is_id(None)
    assert not is_id(True)
    assert not is_id(1.0)
    assert not is_id('1')


def test_to_dict_omits_unset_fields():

    envelope = Envelope(id=5, name=None, data=[1, 2])
    assert envelope.to_dict() == {'id': 5, 'name': None, 'data': [1, 2]}

    envelope = Envelope(id=5, name=None, error=ErrorInfo('ValueError', 'bad', 'Traceback...'))
    assert envelope.to_dict() == {
        'id': 5,
        'name': None,
        'data': None,
        'error': {'kind': 'ValueError', 'message': 'bad', 'debug': 'Traceback...'},
    }


def test_from_dict():

    envelope = Envelope.from_dict({'id': 1, 'name': 'x', 'data': {'a': 1}, 'options': {'timeout': 2}})
    assert envelope == Envelope(1, 'x', {'a': 1}, None, {'timeout': 2})

    envelope = Envelope.from_dict({'id': 1, 'name': None, 'data': None, 'error': {'kind': 'K', 'message': 'm'}})
    assert envelope.error == ErrorInfo('K', 'm')

    # Missing keys are treated as null.
    envelope = Envelope.from_dict({'name': 'bare'})
    assert envelope == Envelope(None, 'bare')

    envelope = Envelope(3, 'same')
    assert Envelope.from_dict(envelope) is envelope


def test_from_dict_error_defaults():

    envelope = Envelope.from_dict({'id': 1, 'name': None, 'error': {}})
    assert envelope.error == ErrorInfo('Error', '')

    envelope = Envelope.from_dict({'id': 1, 'name': None, 'error': {'kind': None, 'message': None}})
    assert envelope.error == ErrorInfo('Error', '')


@pytest.mark.parametrize('bad', [
    'not a mapping',
    {'id': -1, 'name': 'x'},
    {'id': 1.5, 'name': 'x'},
    {'id': True, 'name': None},
    {'id': None, 'name': 7},
    {'id': 1, 'name': None, 'error': 'boom'},
    {'id': 1, 'name': None, 'error': {'kind': 3, 'message': 'm'}},
    {'id': 1, 'name': 'x', 'options': [1]},
])
def test_from_dict_rejects(bad):

    with pytest.raises(msgchannel.EnvelopeError):
        Envelope.from_dict(bad)


def test_error_info_from_exception():

    info = ErrorInfo.from_exception(KeyError('missing'))
    assert info.kind == 'KeyError'
    assert info.message == "'missing'"

    info = ErrorInfo.from_exception(msgchannel.FetchTimeout('slow'))
    assert info.kind == 'TimeOut'
    assert info.message == 'slow'

    info = ErrorInfo.from_exception(ValueError('x'), debug='trace')
    assert info.debug == 'trace'


def test_error_info_ignores_foreign_attributes():
    """ Only channel errors choose their own kind and message; any other
        exception is described by its class name and string form.
    """

    class ThirdParty(Exception):
        kind = 'unrelated'
        message = 'not the real text'

    info = ErrorInfo.from_exception(ThirdParty('the real text'))
    assert info.kind == 'ThirdParty'
    assert info.message == 'the real text'

    info = ErrorInfo.from_exception(msgchannel.ChannelError('denied', kind='PermissionDenied'))
    assert info.kind == 'PermissionDenied'
    assert info.message == 'denied'


def test_factory():

    assert factory.notification('n', 1) == Envelope(None, 'n', 1, None, {})
    assert factory.request(4, 'r', 2) == Envelope(4, 'r', 2, None, {})
    assert factory.request(4, 'r', 2, timeout=0.5).options == {'timeout': 0.5}
    assert factory.response(4, 'ok') == Envelope(4, None, 'ok')

    rejection = factory.rejection(4, ErrorInfo('K', 'm'))
    assert rejection.is_rejection()
    assert rejection.data is None

    assert factory.options_timeout(None) is None
    assert factory.options_timeout({}) is None
    assert factory.options_timeout({'timeout': 3}) == 3


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
