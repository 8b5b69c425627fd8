"""End-to-end checks against fake indexes served by aiohttp."""

import asyncio
import json
from unittest.mock import patch

import pytest

aiohttp_mod = pytest.importorskip("aiohttp")

import aiohttp.test_utils
from aiohttp import web

import mobilewheels
from checker import check_packages
from config import CheckerConfig
from constants import ExitCodes
from registry.sources import SourceIndex
from resolution.models import PlatformSupportStatus

SUPPORTED = PlatformSupportStatus.SUPPORTED
PURE = PlatformSupportStatus.PURE_PYTHON
UNAVAILABLE = PlatformSupportStatus.UNAVAILABLE


def _wheel(filename):
    return {"packagetype": "bdist_wheel", "filename": filename}


PYPI_DOCS = {
    "requests": {
        "info": {"version": "2.32.3", "requires_dist": ["idna<4,>=2.5", "urllib3<3", "PySocks; extra == 'socks'"]},
        "urls": [_wheel("requests-2.32.3-py3-none-any.whl")],
    },
    "idna": {
        "info": {"version": "3.7", "requires_dist": None},
        "urls": [_wheel("idna-3.7-py3-none-any.whl")],
    },
    "urllib3": {
        "info": {"version": "2.2.2", "requires_dist": ["requests"]},
        "urls": [_wheel("urllib3-2.2.2-py3-none-any.whl")],
    },
    "numpy": {
        "info": {"version": "2.2.0", "requires_dist": []},
        "urls": [
            _wheel("numpy-2.2.0-cp313-cp313-manylinux_2_17_x86_64.whl"),
            _wheel("numpy-2.2.0-cp313-cp313-ios_13_0_arm64_iphoneos.whl"),
        ],
    },
    "lxml": {
        "info": {"version": "5.2.0", "requires_dist": ["cssselect>=0.7; extra == 'cssselect'"]},
        "urls": [_wheel("lxml-5.2.0-cp312-cp312-win_amd64.whl")],
    },
}

PYSWIFT_PACKAGES = {
    "pillow": ["pillow-11.0.0-cp313-cp313-ios_13_0_arm64_iphoneos.whl"],
}
KIVY_PACKAGES = {
    "pillow": ["pillow-10.4.0-cp312-cp312-android_24_arm64_v8a.whl"],
    "numpy": ["numpy-2.1.0-cp313-cp313-android_24_arm64_v8a.whl"],
}


def _simple_root(packages):
    links = "".join(f'<a href="/{name}/">{name}</a>\n' for name in packages)
    return f"<html><body>{links}</body></html>"


def _simple_page(files):
    links = "".join(f'<a href="https://files/{f}">{f}</a><br/>\n' for f in files)
    return f"<html><body>{links}</body></html>"


def _make_app(requests_seen):
    async def pypi(request):
        name = request.match_info["name"]
        requests_seen.append(f"pypi/{name}")
        if name not in PYPI_DOCS:
            return web.Response(status=404, text="Not Found")
        return web.json_response(PYPI_DOCS[name])

    def simple(prefix, packages):
        async def root(request):
            requests_seen.append(f"{prefix}/")
            return web.Response(text=_simple_root(packages), content_type="text/html")

        async def page(request):
            name = request.match_info["name"]
            requests_seen.append(f"{prefix}/{name}")
            if name not in packages:
                return web.Response(status=404)
            return web.Response(text=_simple_page(packages[name]), content_type="text/html")

        return root, page

    app = web.Application()
    app.router.add_get("/pypi/{name}/json", pypi)
    swift_root, swift_page = simple("pyswift", PYSWIFT_PACKAGES)
    kivy_root, kivy_page = simple("kivyschool", KIVY_PACKAGES)
    app.router.add_get("/pyswift/simple/", swift_root)
    app.router.add_get("/pyswift/simple/{name}/", swift_page)
    app.router.add_get("/kivyschool/simple/", kivy_root)
    app.router.add_get("/kivyschool/simple/{name}/", kivy_page)
    return app


def _config(ts, **overrides):
    base = f"http://{ts.host}:{ts.port}"
    values = dict(
        pypi_url=f"{base}/pypi",
        pyswift_url=f"{base}/pyswift/simple",
        kivyschool_url=f"{base}/kivyschool/simple",
        concurrency=3,
        timeout=5,
    )
    values.update(overrides)
    return CheckerConfig(**values)


class TestCheckerEndToEnd:
    """Full runs over HTTP."""

    def test_resolution_over_http(self):
        seen = []

        async def _run():
            async with aiohttp.test_utils.TestServer(_make_app(seen)) as ts:
                return await check_packages(["Pillow", "numpy", "requests", "lxml", "ghost"], _config(ts))

        result = asyncio.run(_run())
        by_name = {r.name: r for r in result.records}
        assert [r.name for r in result.records] == ["pillow", "numpy", "requests", "lxml", "ghost"]
        assert result.failures == []

        pillow = by_name["pillow"]
        assert pillow.source is SourceIndex.PYSWIFT
        assert pillow.ios.status is SUPPORTED and pillow.ios.version == "11.0.0"
        assert pillow.android.status is SUPPORTED and pillow.android.version is None
        assert pillow.version == "11.0.0"

        numpy = by_name["numpy"]
        assert numpy.source is SourceIndex.PYPI
        assert numpy.ios.version == "2.2.0"
        assert numpy.android.status is SUPPORTED

        assert by_name["requests"].ios.status is PURE
        assert by_name["lxml"].android.status is UNAVAILABLE
        assert by_name["ghost"].android.status is PURE

        # Each simple-index catalog is fetched once for the whole run
        assert seen.count("pyswift/") == 1
        assert seen.count("kivyschool/") == 1

    def test_dependency_closure_over_http(self):
        seen = []

        async def _run():
            async with aiohttp.test_utils.TestServer(_make_app(seen)) as ts:
                config = _config(ts, check_dependencies=True, depth=3)
                return await check_packages(["requests", "lxml"], config)

        result = asyncio.run(_run())
        requests_rec, lxml_rec = result.records
        assert requests_rec.dependencies == ("idna", "urllib3")
        assert requests_rec.all_dependencies_supported is True
        assert lxml_rec.dependencies == ()
        assert lxml_rec.all_dependencies_supported is True
        # urllib3 -> requests cycle does not refetch requests
        assert seen.count("pypi/requests") == 1

    def test_unreachable_indexes_fail_every_package(self):
        async def _run():
            async with aiohttp.test_utils.TestServer(web.Application()) as ts:
                port = ts.port
            # Server is closed; every request now fails to connect
            config = CheckerConfig(
                pypi_url=f"http://127.0.0.1:{port}/pypi",
                pyswift_url=f"http://127.0.0.1:{port}/pyswift/simple",
                kivyschool_url=f"http://127.0.0.1:{port}/kivyschool/simple",
                timeout=2,
            )
            return await check_packages(["numpy", "six"], config)

        result = asyncio.run(_run())
        assert result.records == []
        assert result.all_failed


class TestMain:
    """Entry point exit codes and outputs."""

    def _main(self, argv, result):
        async def _fake_check(names, config, observer=None):
            return result(names)

        with patch("sys.argv", ["mobile-wheels-checker"] + argv), \
             patch.object(mobilewheels, "check_packages", _fake_check), \
             patch.object(mobilewheels, "configure_logging"), \
             patch.dict("os.environ", {}):
            with pytest.raises(SystemExit) as excinfo:
                mobilewheels.main()
        return excinfo.value.code

    def test_list_file_export_and_warning_exit(self, tmp_path):
        from checker import CheckResult
        from resolution.models import PackageRecord, PlatformSupport

        pkg_file = tmp_path / "packages.txt"
        pkg_file.write_text("# top packages\nnumpy\n\nNumPy\npywin32\nlxml\n", encoding="utf-8")
        out = tmp_path / "out.json"
        checked = []

        def _result(names):
            checked.extend(names)
            return CheckResult(
                records=[PackageRecord(
                    name="lxml",
                    android=PlatformSupport(UNAVAILABLE),
                    ios=PlatformSupport(UNAVAILABLE),
                )],
                total=len(names),
            )

        code = self._main(
            ["-l", str(pkg_file), "-o", str(out), "-q", "--error-on-warnings"],
            _result,
        )
        assert checked == ["numpy", "lxml"]
        assert code == ExitCodes.EXIT_WARNINGS.value
        assert json.loads(out.read_text(encoding="utf-8"))[0]["category"] == "no-mobile-support"

    def test_all_failed_is_connection_error(self):
        from checker import CheckResult

        code = self._main(
            ["-p", "numpy", "-q"],
            lambda names: CheckResult(failures=[(n, RuntimeError("down")) for n in names], total=len(names)),
        )
        assert code == ExitCodes.CONNECTION_ERROR.value

    def test_bad_config_is_file_error(self, tmp_path):
        code = self._main(["-p", "numpy", "--concurrent", "0"], lambda names: None)
        assert code == ExitCodes.FILE_ERROR.value

    def test_missing_list_file(self, tmp_path):
        code = self._main(["-l", str(tmp_path / "missing.txt")], lambda names: None)
        assert code == ExitCodes.FILE_ERROR.value
