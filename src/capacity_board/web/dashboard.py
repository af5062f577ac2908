"""Dashboard HTML with inline CSS and vanilla JS."""


def get_dashboard_html() -> str:
    return """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>Resource Allocation</title>
<style>
  :root {
    --bg: #f8fafc; --surface: #ffffff; --border: #e2e8f0;
    --text: #1e293b; --text-muted: #64748b; --text-dim: #94a3b8;
    --low: #d1fae5; --medium: #fef9c3; --high: #fed7aa; --critical: #fca5a5; --blocked: #e5e7eb;
    --todo: #94a3b8; --in-progress: #3b82f6; --done: #22c55e; --blocked-status: #ef4444;
    --now: #ef4444; --free: #10b981;
  }
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif;
         background: var(--bg); color: var(--text); line-height: 1.4; font-size: 14px; }

  /* Header */
  header { display: flex; justify-content: space-between; align-items: center; gap: 16px;
           height: 72px; padding: 0 24px; background: var(--surface); border-bottom: 1px solid var(--border); }
  header h1 { font-size: 20px; font-weight: 600; }
  .range { font-size: 12px; color: var(--text-muted); }
  .metrics { display: flex; gap: 12px; color: #475467; }
  .controls { display: flex; gap: 8px; align-items: center; }
  .controls input, .controls select, .controls button {
    border: 1px solid #cbd5e1; border-radius: 4px; background: var(--surface); padding: 6px 10px; font-size: 13px; }
  .controls button { cursor: pointer; }
  .controls button.on { background: var(--free); border-color: var(--free); color: white; }

  /* Banner */
  .banner { display: none; justify-content: space-between; align-items: center; height: 48px; padding: 0 24px; font-weight: 500; }
  .banner.RED { display: flex; background: #fee2e2; color: #991b1b; }
  .banner.ORANGE { display: flex; background: #ffedd5; color: #9a3412; }
  .banner.YELLOW { display: flex; background: #fef3c7; color: #92400e; }
  .banner button { background: none; border: none; cursor: pointer; opacity: 0.6; }
  .error { margin: 12px 24px; padding: 8px 12px; background: #fef2f2; border: 1px solid #fecaca; color: #b91c1c; border-radius: 4px; }
  .setup { margin: 12px 24px; padding: 16px; background: var(--surface); border: 1px solid var(--border); border-radius: 8px; }
  .setup pre { margin-top: 8px; background: #0f172a; color: #f8fafc; padding: 12px; border-radius: 4px; font-size: 12px; overflow: auto; }

  /* Grid */
  .grid { position: relative; overflow: auto; background: var(--surface); }
  .row { display: flex; border-bottom: 1px solid var(--border); min-height: 120px; }
  .row.head { min-height: 50px; position: sticky; top: 0; background: var(--surface); z-index: 2; }
  .who { width: 224px; flex-shrink: 0; padding: 12px; border-right: 1px solid var(--border); display: flex; gap: 10px; align-items: center; }
  .who img { width: 40px; height: 40px; border-radius: 50%; }
  .who .cap { font-size: 11px; color: var(--text-muted); background: #f1f5f9; padding: 1px 6px; border-radius: 8px; }
  .row.critical .who { border-left: 4px solid var(--now); font-weight: 700; }
  .days { position: relative; display: flex; }
  .cell { flex-shrink: 0; border-right: 1px solid var(--border); padding: 4px; position: relative; }
  .cell.low { background: var(--low); } .cell.medium { background: var(--medium); }
  .cell.high { background: var(--high); } .cell.critical { background: var(--critical); }
  .cell.blocked { background: repeating-linear-gradient(45deg, var(--blocked), var(--blocked) 6px, #f3f4f6 6px, #f3f4f6 12px); }
  .cell.collapsed { background: #f8fafc; padding: 0; }
  .cell.free { outline: 2px solid var(--free); outline-offset: -2px; }
  .cell .pct { float: right; font-size: 9px; font-weight: 700; color: white; background: #1e293b80; padding: 1px 6px; border-radius: 8px; }
  .cell .tag { float: right; font-size: 9px; font-weight: 700; color: var(--text-muted); }
  .cell .add { visibility: hidden; border: none; background: none; cursor: pointer; }
  .cell:hover .add { visibility: visible; }
  .bar { clear: both; margin-top: 3px; border-radius: 2px; color: white; font-size: 10px; padding: 0 6px;
         overflow: hidden; white-space: nowrap; text-overflow: ellipsis; cursor: grab; }
  .bar.s-todo { background: var(--todo); } .bar.s-in-progress { background: var(--in-progress); }
  .bar.s-done { background: var(--done); } .bar.s-blocked { background: var(--blocked-status); }
  .head .cell { display: flex; align-items: center; justify-content: center; font-size: 12px; color: var(--text-muted); }
  .head .cell.today { color: var(--in-progress); font-weight: 700; box-shadow: inset 0 4px 0 var(--in-progress); }
  .now { position: absolute; top: 0; bottom: 0; width: 2px; background: var(--now); pointer-events: none; z-index: 3; }

  footer { display: flex; justify-content: space-between; padding: 8px 24px; font-size: 12px; color: var(--text-muted);
           border-top: 1px solid var(--border); background: var(--surface); }
  .legend span { display: inline-flex; align-items: center; gap: 4px; margin-left: 12px; }
  .legend i { width: 12px; height: 12px; border-radius: 2px; display: inline-block; }
  .analysis { margin: 12px 24px; padding: 16px; background: var(--surface); border: 1px solid var(--border);
              border-radius: 8px; white-space: pre-wrap; display: none; }
</style>
</head>
<body>
<header>
  <div>
    <h1>Resource Allocation</h1>
    <div class="range"><span id="range"></span></div>
  </div>
  <div class="metrics" id="metrics"></div>
  <div class="controls">
    <button onclick="shift(-1)">&lsaquo;</button>
    <button onclick="goToday()">Today</button>
    <button onclick="shift(1)">&rsaquo;</button>
    <select id="view">
      <option>Week</option><option selected>2 Weeks</option><option>Month</option>
    </select>
    <input id="search" type="text" placeholder="Search developers…">
    <select id="sort">
      <option value="LOAD_WEEK_DESC">Load this week (desc)</option>
      <option value="LOAD_TODAY_DESC">Load today</option>
      <option value="OVERBOOKED_DESC">Overbooked first</option>
      <option value="ALPHABETICAL">Alphabetical</option>
    </select>
    <button id="free" onclick="toggleFree()">Find free slot</button>
    <button onclick="reload()">Refresh</button>
    <button onclick="analyze()">Analyze</button>
  </div>
</header>
<div class="banner" id="banner"><span id="banner-text"></span><button onclick="dismiss()">&times;</button></div>
<div id="notice"></div>
<div class="analysis" id="analysis"></div>
<div class="grid" id="grid"></div>
<footer>
  <label><input type="checkbox" id="weekends"> Always show weekends</label>
  <div class="legend">HEATMAP
    <span><i style="background:var(--low)"></i>&lt;60%</span>
    <span><i style="background:var(--medium)"></i>60-90%</span>
    <span><i style="background:var(--high)"></i>90-110%</span>
    <span><i style="background:var(--critical)"></i>&ge;110%</span>
  </div>
</footer>

<script>
const DAYS = {'Week': 7, '2 Weeks': 14, 'Month': 30};
let start = null;
let highlight = false;
let board = null;

function query() {
  const p = new URLSearchParams({
    view: document.getElementById('view').value,
    sort: document.getElementById('sort').value,
    search: document.getElementById('search').value,
    weekends: document.getElementById('weekends').checked ? '1' : '0',
    highlight: highlight ? '1' : '0',
  });
  if (start) p.set('start', start);
  return p.toString();
}

async function fetchJSON(path, options) {
  const res = await fetch(path, options);
  if (!res.ok) return null;
  return res.json();
}

async function post(path, body) {
  return fetchJSON(path, {method: 'POST', headers: {'Content-Type': 'application/json'},
                          body: body ? JSON.stringify(body) : undefined});
}

async function load() {
  board = await fetchJSON('/api/board?' + query());
  if (!board) return;
  start = board.view.start;
  render();
}

function render() {
  document.getElementById('range').textContent = `${board.view.start} – ${board.view.end} · ${board.view.mode}`;
  const m = board.metrics;
  document.getElementById('metrics').innerHTML =
    `<span>Team <strong>${m.utilization}%</strong> utilised</span>` +
    `<span><strong>${m.free}</strong> free today</span>` +
    `<span><strong>${m.overbooked}</strong> overbooked</span>`;

  const banner = document.getElementById('banner');
  banner.className = 'banner' + (board.warning.visible ? ' ' + board.warning.level : '');
  document.getElementById('banner-text').textContent = board.warning.message || '';

  renderNotice();

  let html = '<div class="row head"><div class="who">Avatar / Name</div><div class="days">';
  for (const c of board.columns) {
    const label = c.collapsed ? '' : new Date(c.date + 'T00:00:00').toLocaleDateString('en-US', {weekday: 'short', day: 'numeric'});
    html += `<div class="cell ${c.today ? 'today' : ''}" style="width:${c.width}px">${label}</div>`;
  }
  html += nowLine() + '</div></div>';

  for (const row of board.rows) {
    const d = row.developer;
    html += `<div class="row ${row.critical ? 'critical' : ''}">
      <div class="who"><img src="${esc(d.avatar)}" alt=""><div><div>${esc(d.name)}</div>
      <span class="cap">${d.capacity}h</span></div></div><div class="days">`;
    row.cells.forEach((cell, i) => { html += renderCell(d.id, cell, board.columns[i]); });
    html += nowLine() + '</div></div>';
  }
  if (board.rows.length === 0) html += '<div class="row"><div class="who">No developers</div></div>';
  document.getElementById('grid').innerHTML = html;
}

function renderNotice() {
  const notice = document.getElementById('notice');
  if (board.setup_required) {
    fetch('/api/setup-sql').then(r => r.text()).then(sql => {
      notice.innerHTML = `<div class="setup"><strong>Setup Required</strong><pre>${esc(sql)}</pre></div>`;
    });
  } else if (board.error) {
    notice.innerHTML = `<div class="error">${esc(board.error)}</div>`;
  } else {
    notice.innerHTML = '';
  }
}

function renderCell(devId, cell, column) {
  if (cell.collapsed) return `<div class="cell collapsed" style="width:${column.width}px"></div>`;
  const cls = ['cell', cell.band, cell.free_slot ? 'free' : ''].join(' ');
  const badge = cell.blocked
    ? `<span class="tag" title="${esc(cell.block_reason)}">BLOCKED</span>`
    : `<span class="pct">${cell.percentage}%</span>`;
  const bars = cell.bars.map(b =>
    `<div class="bar s-${b.status.toLowerCase().replace(' ', '-')}" draggable="true"
          ondragstart="drag(event, '${esc(b.id)}')" style="height:${b.height_px}px"
          title="${esc(b.key)}: ${esc(b.title)} (${esc(b.status)})">${esc(b.key)} ${esc(b.title)}</div>`).join('');
  return `<div class="${cls}" style="width:${column.width}px"
      ondragover="event.preventDefault()" ondrop="drop(event, '${esc(devId)}', '${cell.date}')">
      <button class="add" onclick="addBlock('${esc(devId)}', '${cell.date}')">+</button>${badge}${bars}</div>`;
}

function nowLine() {
  if (board.now_offset === null) return '';
  return `<div class="now" style="left:${board.now_offset}px"></div>`;
}

function drag(e, ticketId) { e.dataTransfer.setData('ticketId', ticketId); }

async function drop(e, devId, date) {
  e.preventDefault();
  const ticketId = e.dataTransfer.getData('ticketId');
  if (!ticketId) return;
  await post(`/api/tickets/${encodeURIComponent(ticketId)}/move`, {developer_id: devId, date});
  load();
}

async function addBlock(devId, date) {
  const notes = prompt('Reason for unavailable time (blank for Out of Office):');
  if (notes === null) return;
  await post('/api/availability', {developer_id: devId, date, type: 'Out of Office', notes});
  load();
}

async function dismiss() { await post('/api/warning/dismiss?' + query()); load(); }
async function reload() { await post('/api/reload'); load(); }

async function analyze() {
  const panel = document.getElementById('analysis');
  panel.style.display = 'block';
  panel.textContent = 'Analyzing…';
  const res = await post('/api/analyze');
  panel.textContent = res ? res.analysis : 'Failed to analyze schedule.';
}

function shift(steps) {
  const d = new Date(start + 'T00:00:00');
  d.setDate(d.getDate() + steps * DAYS[document.getElementById('view').value]);
  start = d.toISOString().slice(0, 10);
  load();
}

function goToday() { start = null; load(); }
function toggleFree() { highlight = !highlight; document.getElementById('free').classList.toggle('on', highlight); load(); }

function esc(s) {
  if (!s) return '';
  const d = document.createElement('div');
  d.textContent = s;
  return d.innerHTML.replace(/'/g, '&#39;').replace(/"/g, '&quot;');
}

for (const id of ['view', 'sort', 'weekends']) document.getElementById(id).addEventListener('change', load);
document.getElementById('search').addEventListener('input', load);

load();
// Now marker moves with the clock
setInterval(load, 60000);
</script>
</body>
</html>"""
