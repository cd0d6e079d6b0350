import pytest

from secure_app.main import make_demo_authenticator, parse_args
from secure_app.models.enums import AuthenticationStatus
from secure_app.services.secure_controller import SecureController


def test_parse_args_defaults():
    args = parse_args([])

    assert args.config is None
    assert args.auth_result == "success"
    assert args.auth_delay == 1.0


def test_parse_args_rejects_unknown_result():
    with pytest.raises(SystemExit):
        parse_args(["--auth-result", "maybe"])


@pytest.mark.asyncio
@pytest.mark.parametrize("result, expected", [
    ("failed", AuthenticationStatus.FAILED),
    ("logout", AuthenticationStatus.LOGOUT),
    ("none", None),
])
async def test_demo_authenticator(result, expected):
    authenticate = make_demo_authenticator(result, 0)

    assert await authenticate(SecureController()) is expected
