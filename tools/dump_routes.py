import sys, os
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from storeadmin.app_factory import create_app

app = create_app({"TESTING": True, "store_backend": "memory"})

print("Routes under /api/*:")
for r in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
    if r.rule.startswith('/api/'):
        methods = ','.join(sorted(m for m in r.methods if m in ('GET','POST','PUT','DELETE','PATCH')))
        print(f"{methods:20s} {r.rule:40s} -> {r.endpoint}")
