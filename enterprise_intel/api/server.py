from __future__ import annotations
from pathlib import Path
from flask import Flask, request, jsonify, Response
from enterprise_intel.api.orchestrator import (
    DuplicateCompanyError,
    IntelService,
    NotFound,
    build_default_service,
    serialize_enterprise,
    serialize_group,
)
from enterprise_intel.config.env import get_log_config
from enterprise_intel.config.logging import configure_logging
from enterprise_intel.enrichment.base import EnrichmentError
from enterprise_intel.exports.reports import coverage_report_md
from enterprise_intel.exports.writers import write_directory, write_enterprises
from enterprise_intel.store.json_store import StoreError

import os
import time
import json
from collections import deque, defaultdict


OPENAPI_PATH = Path(__file__).resolve().parent / "openapi.json"

# route prefixes guarded by the API key
PROTECTED_PREFIXES = ('/companies', '/enterprises', '/lists')

app = Flask(__name__)

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return os.environ.get('API_KEY')


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None:
        n = int(os.environ.get('RATE_LIMIT_N', '5'))
    if w is None:
        w = float(os.environ.get('RATE_LIMIT_WINDOW_SEC', '1.0'))
    return int(n), float(w)


def _service() -> IntelService:
    svc = app.config.get('SERVICE')
    if svc is None:
        svc = build_default_service()
        app.config['SERVICE'] = svc
    return svc

_recent: dict[str, deque[float]] = defaultdict(lambda: deque(maxlen=100))


def _client_ip() -> str:
    xff = request.headers.get('X-Forwarded-For')
    if xff:
        return xff.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return jsonify({'error': 'unauthorized'}), 401
    return None


def _check_rate_limit(ip: str):
    # Allow if rate limiting disabled or N <= 0
    n, window = _get_rate_limit()
    if n <= 0:
        return None
    now = time.time()
    dq = _recent[ip]
    # Drop old entries outside window
    while dq and now - dq[0] > window:
        dq.popleft()
    if len(dq) >= n:
        retry = max(0.0, window - (now - dq[0]))
        resp = jsonify({'error': 'rate_limited'})
        resp.status_code = 429
        resp.headers['Retry-After'] = f"{retry:.2f}"
        return resp
    dq.append(now)
    return None


def _calls_enrichment() -> bool:
    if request.method != 'POST':
        return False
    path = request.path
    return path in ('/companies', '/companies/refresh') or (path.startswith('/enterprises/') and path.endswith('/research'))


@app.before_request
def _auth_and_rate_limit():
    if request.path.startswith(PROTECTED_PREFIXES):
        unauthorized = _check_api_key()
        if unauthorized is not None:
            return unauthorized
        # Rate limit only the routes that hit the enrichment service
        if _calls_enrichment():
            rl = _check_rate_limit(_client_ip())
            if rl is not None:
                return rl
    return None


@app.errorhandler(NotFound)
def _not_found(e):
    return jsonify({'error': 'not_found', 'detail': str(e.args[0]) if e.args else ''}), 404


@app.errorhandler(DuplicateCompanyError)
def _duplicate(e):
    return jsonify({'error': 'duplicate', 'detail': str(e), 'company': e.company.to_dict()}), 409


@app.errorhandler(ValueError)
def _bad_request(e):
    return jsonify({'error': 'bad_request', 'detail': str(e)}), 400


@app.errorhandler(EnrichmentError)
def _enrichment_failed(e):
    return jsonify({'error': 'enrichment_failed', 'detail': str(e)}), 502


@app.errorhandler(StoreError)
def _store_failed(e):
    return jsonify({'error': 'store_unavailable', 'detail': str(e)}), 503


def _payload() -> dict:
    return request.get_json(force=True, silent=True) or {}

# Enterprises

@app.get('/enterprises')
def list_enterprises():
    svc = _service()
    view = svc.enterprises(search=request.args.get('search', ''), status=request.args.get('status') or None)
    return jsonify({'enterprises': [serialize_enterprise(e, svc.aliases) for e in view]})


@app.get('/enterprises/stats')
def enterprise_stats():
    return jsonify(_service().stats())


@app.get('/enterprises.csv')
def enterprises_csv():
    svc = _service()
    rows = [serialize_enterprise(e, svc.aliases) for e in svc.view()]
    return Response(write_enterprises(rows), mimetype='text/csv')


@app.get('/enterprises/report.md')
def enterprises_report():
    svc = _service()
    view = svc.view()
    body = coverage_report_md(svc.stats(), [serialize_enterprise(e, svc.aliases) for e in view])
    return Response(body, mimetype='text/markdown')


@app.get('/enterprises/<name>')
def get_enterprise(name: str):
    svc = _service()
    return jsonify(serialize_enterprise(svc.enterprise(name), svc.aliases, detail=True))


@app.post('/enterprises/<name>/research')
def post_research(name: str):
    record = _service().research(name)
    return jsonify(record.to_dict())


@app.post('/enterprises/<name>/news')
def post_news(name: str):
    payload = _payload()
    item = _service().add_news(
        name,
        title=payload.get('title') or '',
        url=payload.get('url') or '',
        date_str=payload.get('date') or '',
        summary=payload.get('summary') or '',
    )
    return jsonify(item.to_dict()), 201

# Directory

@app.get('/companies')
def list_companies():
    groups = _service().directory(
        category=request.args.get('category', 'All'),
        region=request.args.get('region', 'All'),
        focus=request.args.get('focus', 'All'),
        search=request.args.get('search', ''),
        sort_by=request.args.get('sort', 'name'),
    )
    return jsonify({'companies': [serialize_group(g) for g in groups]})


@app.get('/companies.csv')
def companies_csv():
    rows = [c.to_dict() for c in _service().companies()]
    return Response(write_directory(rows), mimetype='text/csv')


@app.post('/companies')
def post_company():
    name = _payload().get('name') or ''
    if not name.strip():
        return jsonify({'error': 'name is required'}), 400
    company = _service().add_company(name)
    return jsonify(company.to_dict()), 201


@app.post('/companies/import')
def import_companies():
    names = _payload().get('names')
    if not isinstance(names, list):
        return jsonify({'error': 'names must be a list'}), 400
    return jsonify(_service().import_companies([str(n) for n in names]))


@app.post('/companies/refresh')
def refresh_companies():
    return jsonify(_service().refresh_pending())


@app.post('/companies/merge-duplicates')
def merge_companies():
    return jsonify(_service().merge_duplicates().to_dict())


@app.get('/companies/<cid>')
def get_company(cid: str):
    return jsonify(_service().company(cid).to_dict())


@app.patch('/companies/<cid>')
def patch_company(cid: str):
    return jsonify(_service().update_company(cid, _payload()).to_dict())


@app.delete('/companies/<cid>')
def delete_company(cid: str):
    _service().delete_company(cid)
    return '', 204

# Lists

@app.get('/lists')
def get_lists():
    return jsonify({'lists': [lst.to_dict() for lst in _service().lists()]})


@app.post('/lists')
def post_list():
    lst = _service().create_list(_payload().get('name') or '')
    return jsonify(lst.to_dict()), 201


@app.post('/lists/<list_id>/entries')
def post_list_entry(list_id: str):
    payload = _payload()
    lst = _service().add_list_entry(
        list_id,
        payload.get('company_id') or '',
        label=payload.get('label') or '',
        priority=payload.get('priority') or 'Medium',
    )
    return jsonify(lst.to_dict())


@app.get('/openapi.json')
def get_openapi():
    try:
        spec = json.loads(OPENAPI_PATH.read_text())
    except (OSError, json.JSONDecodeError):
        return jsonify({'error': 'openapi_not_found'}), 404
    return jsonify(spec)


if __name__ == '__main__':
    configure_logging(get_log_config().level)
    app.run(host='0.0.0.0', port=8000)
