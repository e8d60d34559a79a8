import asyncio

from aiohttp import web
from aiohttp.test_utils import TestServer

from url_directory.models.weblink import CheckResult, ValidationOutcome
from url_directory.utils.url_validator import URLValidator, ValidatorAdapter, classify


def test_classify_maps_status_codes() -> None:
    assert classify(CheckResult(ok=True, status_code=200)) is ValidationOutcome.REACHABLE
    assert classify(CheckResult(ok=True, status_code=204)) is ValidationOutcome.REACHABLE
    assert classify(CheckResult(ok=False, status_code=401)) is ValidationOutcome.REQUIRES_AUTH
    assert classify(CheckResult(ok=False, status_code=403)) is ValidationOutcome.UNREACHABLE
    assert classify(CheckResult(ok=False, status_code=500)) is ValidationOutcome.UNREACHABLE
    assert classify(CheckResult(ok=False, status_code='error')) is ValidationOutcome.UNREACHABLE


def test_adapter_folds_check_exceptions_into_unreachable() -> None:
    async def broken_check(url):
        raise RuntimeError('connection reset')

    outcome = asyncio.run(ValidatorAdapter(broken_check).validate('https://a.example'))

    assert outcome is ValidationOutcome.UNREACHABLE


def test_adapter_checks_each_url_once(network) -> None:
    network.statuses['https://secret.example'] = 401
    adapter = ValidatorAdapter(network.check)

    outcome = asyncio.run(adapter.validate('https://secret.example'))

    assert outcome is ValidationOutcome.REQUIRES_AUTH
    assert network.checked == ['https://secret.example']


def _app() -> web.Application:
    async def ok(request):
        return web.Response(text='<html><head><TITLE> Hello World </TITLE></head></html>',
                            content_type='text/html')

    async def secret(request):
        return web.Response(status=401)

    async def untitled(request):
        return web.Response(text='<p>no title</p>', content_type='text/html')

    app = web.Application()
    app.router.add_get('/ok', ok)
    app.router.add_get('/secret', secret)
    app.router.add_get('/untitled', untitled)
    return app


def test_validator_against_local_server() -> None:
    async def run():
        validator = URLValidator(timeout=5)
        async with TestServer(_app()) as server:
            return (
                await validator.check(str(server.make_url('/ok'))),
                await validator.check(str(server.make_url('/secret'))),
                await validator.check(str(server.make_url('/missing'))),
                await validator.fetch_title(str(server.make_url('/ok'))),
                await validator.fetch_title(str(server.make_url('/untitled'))),
            )

    ok, secret, missing, title, no_title = asyncio.run(run())

    assert ok == CheckResult(ok=True, status_code=200)
    assert secret == CheckResult(ok=False, status_code=401)
    assert missing == CheckResult(ok=False, status_code=404)
    assert title == 'Hello World'
    assert no_title == ''


def test_network_failures_do_not_raise() -> None:
    validator = URLValidator(timeout=1)

    result = asyncio.run(validator.check('http://'))
    title = asyncio.run(validator.fetch_title('http://'))

    assert result == CheckResult(ok=False, status_code='error')
    assert title == ''
