"""Minimal HTML shell that draws the JSON screens."""

UI_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Munchboxd</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 0;
             background: #020617; color: #f8fafc; display: flex; }
      aside { width: 16rem; padding: 1.5rem 1rem; border-right: 1px solid #0f172a; }
      main { flex: 1; padding: 2.5rem; }
      button { padding: 0.4rem 0.8rem; margin: 0.2rem 0; }
      input, select, textarea { display: block; margin-bottom: 0.6rem; width: 320px; }
      .card { border: 1px solid #1e293b; border-radius: 0.75rem;
              padding: 0.75rem 1rem; margin-bottom: 0.75rem; }
      .error { color: #f87171; } .ok { color: #34d399; }
    </style>
  </head>
  <body>
    <aside id="sidebar"></aside>
    <main id="main">Loading…</main>
    <script>
      // Every server value goes through esc() before it reaches innerHTML.
      function esc(value) {
        return String(value ?? '')
          .replace(/&/g, '&amp;')
          .replace(/</g, '&lt;')
          .replace(/>/g, '&gt;')
          .replace(/"/g, '&quot;')
          .replace(/'/g, '&#39;');
      }
      async function call(method, path, body) {
        const res = await fetch(path, {
          method,
          headers: { 'Content-Type': 'application/json' },
          body: body ? JSON.stringify(body) : undefined,
        });
        const data = await res.json();
        if (!res.ok) { alert(JSON.stringify(data.detail)); return; }
        draw(data);
      }
      function message(m) {
        return m ? `<p class="${m.is_error ? 'error' : 'ok'}">${esc(m.text)}</p>` : '';
      }
      function card(c) {
        const user = c.user ? `<div>${esc(c.user.handle)}</div>` : '';
        return `<div class="card">${user}<div>${esc(c.header)} ${esc(c.stars)}</div>
          <strong>${esc(c.food)}</strong><div>${esc(c.meta)}</div>
          <p>${esc(c.description)}</p></div>`;
      }
      function list(l) {
        const subtitle = l.subtitle ? `<p>${esc(l.subtitle)}</p>` : '';
        const body = l.empty ? `<p>${esc(l.empty)}</p>` : l.cards.map(card).join('');
        return `<h2>${esc(l.title)}</h2>${subtitle}${body}`;
      }
      function form(f) {
        const opts = (xs, v) => xs.map(
          x => `<option ${x === v ? 'selected' : ''}>${esc(x)}</option>`).join('');
        const v = f.values;
        return `<h2>${esc(f.title)}</h2><p>${esc(f.subtitle)}</p>
          <input id="strain_name" placeholder="e.g. GMO Cookies" value="${esc(v.strain_name)}" />
          <input id="brand" placeholder="e.g. Sunnyside, RISE" value="${esc(v.brand)}" />
          <input id="food_name" placeholder="What did you eat?" value="${esc(v.food_name)}" />
          <textarea id="description" rows="3">${esc(v.description)}</textarea>
          <select id="product_type">${opts(f.product_types, v.product_type)}</select>
          <input id="high_rating" type="range" min="1" max="5" value="${esc(v.high_rating)}" />
          <select id="source_type">${opts(f.source_types, v.source_type)}</select>
          <input id="munchie_rating" type="number" min="1" max="5" value="${esc(v.munchie_rating)}" />
          <button ${f.submit_disabled ? 'disabled' : ''} onclick="saveCombo()">
            ${esc(f.submit_label)}</button>${message(f.message)}`;
      }
      function saveCombo() {
        const ids = ['strain_name', 'brand', 'food_name', 'description',
                     'product_type', 'source_type'];
        const body = Object.fromEntries(
          ids.map(id => [id, document.getElementById(id).value]));
        body.high_rating = Number(document.getElementById('high_rating').value);
        body.munchie_rating = Number(document.getElementById('munchie_rating').value);
        call('POST', '/combos', body);
      }
      function auth(s) {
        const register = s.mode === 'register';
        const username = register ? '<input id="username" placeholder="munchmaster420" />' : '';
        return `<h1>${esc(s.title)}</h1><p>${esc(s.tagline)}</p>
          <button onclick="call('POST', '/auth/mode/login')">Log in</button>
          <button onclick="call('POST', '/auth/mode/register')">Create account</button>
          ${username}<input id="email" type="email" placeholder="you@example.com" />
          <input id="password" type="password" minlength="6" />
          <button onclick="submitAuth(${register})">${esc(s.submit_label)}</button>
          ${message(s.message)}`;
      }
      function submitAuth(register) {
        const body = {
          email: document.getElementById('email').value,
          password: document.getElementById('password').value,
        };
        if (register) body.username = document.getElementById('username').value;
        call('POST', register ? '/auth/sign-up' : '/auth/sign-in', body);
      }
      function draw(s) {
        const side = document.getElementById('sidebar');
        const main = document.getElementById('main');
        if (s.screen === 'loading') { side.innerHTML = ''; main.textContent = s.text; return; }
        if (s.screen === 'auth') { side.innerHTML = ''; main.innerHTML = auth(s); return; }
        const b = s.sidebar.badge;
        side.innerHTML = `<h3>${esc(s.sidebar.title)}</h3>`
          + `<p>${esc(b.handle)}<br/>${esc(b.email)}</p>`
          + s.sidebar.nav.map(n => `<button data-tab="${esc(n.id)}" `
            + `onclick="call('POST', '/tabs/' + this.dataset.tab)">`
            + `${n.active ? '» ' : ''}${esc(n.label)}</button><br/>`).join('')
          + `<button onclick="call('POST', '/auth/sign-out')">Sign out</button>`;
        const c = s.content;
        if (c.form && c.recent) main.innerHTML = form(c.form) + list(c.recent);
        else if (c.form) main.innerHTML = form(c.form);
        else main.innerHTML = list(c);
      }
      call('GET', '/');
    </script>
  </body>
</html>
"""
