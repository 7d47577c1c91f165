"""Single-page HTML UI in two layouts sharing one script."""

from enum import Enum


class Layout(str, Enum):
    """Visual arrangement of the map and the list."""

    MAP = "map"
    SPLIT = "split"


_LAYOUT_CSS = {
    Layout.MAP: """
      #map { position: fixed; inset: 0; z-index: 0; }
      #panel { position: fixed; top: 80px; right: 20px; bottom: 20px; width: 360px;
        overflow: auto; z-index: 10; background: rgba(250,247,242,0.96);
        border-radius: 16px; box-shadow: 0 8px 32px rgba(0,0,0,0.25); padding: 16px; }
      header { position: fixed; top: 20px; left: 50%; transform: translateX(-50%);
        z-index: 10; background: rgba(28,43,30,0.92); color: #fff;
        border-radius: 40px; padding: 8px 20px; }
    """,
    Layout.SPLIT: """
      body { display: grid; grid-template-columns: 420px 1fr;
        grid-template-rows: auto 1fr; height: 100vh; }
      header { grid-column: 1 / 3; background: #1c2b1e; color: #fff; padding: 12px 20px; }
      #panel { overflow: auto; padding: 16px; }
      #map { height: 100%; }
    """,
}

_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Restaurant Tracker</title>
    <link rel="stylesheet"
      href="https://cdnjs.cloudflare.com/ajax/libs/leaflet/1.9.4/leaflet.min.css" />
    <script src="https://cdnjs.cloudflare.com/ajax/libs/leaflet/1.9.4/leaflet.min.js"></script>
    <style>
      body { margin: 0; font-family: ui-sans-serif, system-ui, sans-serif; }
      .card { background: #fff; border-radius: 12px; padding: 12px; margin-bottom: 10px; }
      .card img { width: 100%; max-height: 140px; object-fit: cover; border-radius: 8px; }
      .filters button.active { background: #1c2b1e; color: #fff; }
      #toast { position: fixed; bottom: 32px; left: 50%; transform: translateX(-50%);
        background: #1c2b1e; color: #fff; padding: 10px 20px; border-radius: 30px;
        z-index: 20; display: none; }
      form label { display: block; margin-top: 8px; font-size: 12px; }
      #form-map { height: 180px; margin-top: 8px; }
      .photo-item { display: inline-block; position: relative; margin: 4px; }
      .photo-item img { width: 64px; height: 64px; object-fit: cover; border-radius: 6px; }
      .photo-remove { position: absolute; top: 0; right: 0; }
      .popup { max-width: 220px; }
      .popup img { width: 100%; max-height: 120px; object-fit: cover; border-radius: 6px; }
      .popup p { color: #666; font-size: 12px; }
      __LAYOUT_CSS__
    </style>
  </head>
  <body>
    <header>
      <strong>Restaurants</strong>
      <span id="counts"></span> · <span id="sync">connecting</span>
    </header>
    <div id="map"></div>
    <div id="panel">
      <input id="search" placeholder="Search name, area, cuisine" />
      <div class="filters">
        <button data-filter="all" class="active">All</button>
        <button data-filter="visited">Visited</button>
        <button data-filter="wantToTry">Want to try</button>
      </div>
      <button id="add">+ Add</button>
      <form id="form" hidden>
        <input type="hidden" name="id" />
        <label>Name <input name="name" required /></label>
        <label>Neighborhood <select name="neighborhood"></select></label>
        <label>Cuisine <select name="cuisine"></select></label>
        <label>Address <input name="address" /></label>
        <label><input type="checkbox" name="visited" /> Visited</label>
        <div id="ratings"></div>
        <label>Notes <textarea name="notes"></textarea></label>
        <label>Photo <input type="file" accept="image/*" id="photo" /></label>
        <div id="photo-list"></div>
        <div id="form-map"></div>
        <button type="submit" id="save">Save Restaurant</button>
        <button type="button" id="cancel">Cancel</button>
      </form>
      <div id="list"></div>
    </div>
    <div id="toast"></div>
    <script>
      const state = { filter: "all", q: "", config: null, draft: null, saving: false };
      const map = L.map("map");
      const pins = L.layerGroup().addTo(map);
      let formMap = null;
      let formPin = null;
      const NOTES_EXCERPT = 90;

      async function api(path, options) {
        const res = await fetch(path, options);
        if (!res.ok) throw new Error(res.status);
        return res.json();
      }

      function el(tag, text, className) {
        const node = document.createElement(tag);
        if (text) node.textContent = text;
        if (className) node.className = className;
        return node;
      }

      function photo(src) {
        const img = document.createElement("img");
        img.src = src;
        return img;
      }

      function popupFor(m) {
        const box = el("div", "", "popup");
        if (m.photo) box.appendChild(photo(m.photo));
        box.appendChild(el("strong", m.name));
        box.appendChild(el("div", m.cuisine + " · " + m.neighborhood));
        box.appendChild(el("div", m.visited ? "★ " + m.average_rating : "🔖 Want to try"));
        if (m.notes) {
          const excerpt = m.notes.length > NOTES_EXCERPT
            ? m.notes.slice(0, NOTES_EXCERPT) + "…" : m.notes;
          box.appendChild(el("p", excerpt));
        }
        return box;
      }

      function renderPhotos() {
        const holder = document.getElementById("photo-list");
        holder.replaceChildren();
        state.draft.photos.forEach((src, index) => {
          const item = el("div", "", "photo-item");
          const drop = el("button", "✕", "photo-remove");
          drop.type = "button";
          drop.onclick = () => {
            state.draft.photos.splice(index, 1);
            renderPhotos();
          };
          item.append(photo(src), drop);
          holder.appendChild(item);
        });
      }

      function params() {
        const p = new URLSearchParams({ filter: state.filter });
        if (state.q) p.set("q", state.q);
        return p.toString();
      }

      async function refresh() {
        const data = await api("/restaurants?" + params());
        document.getElementById("counts").textContent =
          data.counts.visited + " visited · " + data.counts.wantToTry + " to try";
        document.getElementById("sync").textContent = data.sync_status;
        const list = document.getElementById("list");
        list.replaceChildren();
        for (const r of data.restaurants) {
          const card = el("div", "", "card");
          if (r.photos[0]) card.appendChild(photo(r.photos[0]));
          card.appendChild(el("h3", r.name));
          card.appendChild(el("div", r.neighborhood + " · " + r.cuisine));
          card.appendChild(el("div", r.visited ? "★ " + r.averageRating : "Want to try"));
          const edit = el("button", "Edit", "edit");
          edit.onclick = () => openForm(r);
          const remove = el("button", "Remove", "remove");
          remove.onclick = () => removeRestaurant(r.id);
          card.append(edit, remove);
          list.appendChild(card);
        }
        const markers = await api("/restaurants/markers?" + params());
        pins.clearLayers();
        for (const m of markers.markers) {
          const icon = L.divIcon({ className: "", iconSize: [24, 24], html:
            '<div style="width:24px;height:24px;border-radius:50% 50% 50% 0;background:' +
            m.color + ";border:3px solid " + m.border + ';transform:rotate(-45deg)"></div>' });
          L.marker([m.lat, m.lng], { icon }).bindPopup(popupFor(m)).addTo(pins);
        }
        const notes = await api("/notifications");
        const toast = document.getElementById("toast");
        const last = notes.notifications[notes.notifications.length - 1];
        toast.style.display = last ? "block" : "none";
        toast.textContent = last ? last.message : "";
      }

      function openForm(r) {
        const form = document.getElementById("form");
        const c = state.config;
        state.draft = r
          ? { ...r, photos: [...r.photos] }
          : { ratings: {}, photos: [], lat: c.center.lat, lng: c.center.lng };
        form.hidden = false;
        renderPhotos();
        form.elements["id"].value = r ? r.id : "";
        form.elements["name"].value = r ? r.name : "";
        form.neighborhood.value = r ? r.neighborhood : c.neighborhoods[0];
        form.cuisine.value = r ? r.cuisine : c.cuisines[0];
        form.address.value = r ? r.address : "";
        form.notes.value = r ? r.notes : "";
        form.visited.checked = r ? r.visited : false;
        for (const cat of c.rating_categories) {
          document.getElementById("rating-" + cat).value = (r && r.ratings[cat]) || 0;
        }
        if (!formMap) {
          formMap = L.map("form-map");
          L.tileLayer("https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png").addTo(formMap);
          formPin = L.marker([0, 0], { draggable: true }).addTo(formMap);
          formPin.on("dragend", () => {
            const p = formPin.getLatLng();
            state.draft.lat = p.lat;
            state.draft.lng = p.lng;
          });
          formMap.on("click", (e) => {
            formPin.setLatLng(e.latlng);
            state.draft.lat = e.latlng.lat;
            state.draft.lng = e.latlng.lng;
          });
        }
        formMap.setView([state.draft.lat, state.draft.lng], 13);
        formPin.setLatLng([state.draft.lat, state.draft.lng]);
      }

      async function saveRestaurant(event) {
        event.preventDefault();
        if (state.saving) return;
        const form = event.target;
        const ratings = {};
        for (const cat of state.config.rating_categories) {
          ratings[cat] = parseInt(document.getElementById("rating-" + cat).value, 10) || 0;
        }
        const body = {
          id: form.elements["id"].value || null, name: form.elements["name"].value,
          neighborhood: form.neighborhood.value, cuisine: form.cuisine.value,
          address: form.address.value, notes: form.notes.value,
          visited: form.visited.checked, ratings,
          lat: state.draft.lat, lng: state.draft.lng, photos: state.draft.photos,
        };
        state.saving = true;
        document.getElementById("save").disabled = true;
        try {
          await api("/restaurants", { method: "POST",
            headers: { "Content-Type": "application/json" }, body: JSON.stringify(body) });
          form.hidden = true;
        } catch (err) {
          // Form stays open for a retry; the failure shows as a toast.
        } finally {
          state.saving = false;
          document.getElementById("save").disabled = false;
          refresh();
        }
      }

      async function removeRestaurant(id) {
        if (!window.confirm("Remove this restaurant?")) return;
        try {
          await api("/restaurants/" + encodeURIComponent(id) + "?confirm=true", { method: "DELETE" });
        } catch (err) {
          // Shown as a toast.
        }
        refresh();
      }

      async function boot() {
        state.config = await api("/config");
        map.setView([state.config.center.lat, state.config.center.lng], 13);
        L.tileLayer("https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png").addTo(map);
        const form = document.getElementById("form");
        for (const n of state.config.neighborhoods) form.neighborhood.add(new Option(n, n));
        for (const c of state.config.cuisines) form.cuisine.add(new Option(c, c));
        const ratings = document.getElementById("ratings");
        for (const cat of state.config.rating_categories) {
          ratings.insertAdjacentHTML("beforeend",
            "<label>" + cat + ' <input type="number" min="0" max="5" id="rating-' + cat + '"/></label>');
        }
        form.onsubmit = saveRestaurant;
        document.getElementById("cancel").onclick = () => { form.hidden = true; };
        document.getElementById("add").onclick = () => openForm(null);
        document.getElementById("photo").onchange = (e) => {
          const file = e.target.files[0];
          if (!file) return;
          const reader = new FileReader();
          reader.onload = (ev) => {
            state.draft.photos.push(ev.target.result);
            renderPhotos();
          };
          reader.readAsDataURL(file);
          e.target.value = "";
        };
        document.getElementById("search").oninput = (e) => { state.q = e.target.value; refresh(); };
        for (const b of document.querySelectorAll(".filters button")) {
          b.onclick = () => {
            state.filter = b.dataset.filter;
            document.querySelectorAll(".filters button").forEach((x) => x.classList.remove("active"));
            b.classList.add("active");
            refresh();
          };
        }
        await refresh();
        setInterval(refresh, 3000);
      }

      boot();
    </script>
  </body>
</html>
"""


def render_ui(layout: Layout) -> str:
    """Return the UI page for the requested layout."""
    return _TEMPLATE.replace("__LAYOUT_CSS__", _LAYOUT_CSS[layout])
