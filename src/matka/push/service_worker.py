"""Service worker script served to browsers that subscribe to pushes."""

from __future__ import annotations

_TEMPLATE = """\
self.addEventListener('push', (event) => {
  let data = { title: '__TITLE__', body: 'You have a new message', icon: '__ICON__' };

  if (event.data) {
    try {
      data = event.data.json();
    } catch (e) {
      data.body = event.data.text();
    }
  }

  event.waitUntil(
    self.registration.showNotification(data.title, {
      body: data.body,
      icon: data.icon || '__ICON__',
      badge: '__ICON__',
      vibrate: [200, 100, 200],
      requireInteraction: true
    })
  );
});

self.addEventListener('notificationclick', (event) => {
  event.notification.close();
  event.waitUntil(
    clients.matchAll({ type: 'window' }).then((clientList) => {
      for (const client of clientList) {
        if ('focus' in client) {
          return client.focus();
        }
      }
      if (clients.openWindow) {
        return clients.openWindow('/');
      }
    })
  );
});

self.addEventListener('message', (event) => {
  if (event.data && event.data.type === 'SHOW_NOTIFICATION') {
    self.registration.showNotification(event.data.title, event.data.options);
  }
});
"""


def render_service_worker(icon: str, default_title: str = "M3 Matka Notification") -> str:
    """Fill in the notification icon and fallback title."""
    return _TEMPLATE.replace("__ICON__", icon).replace("__TITLE__", default_title)
