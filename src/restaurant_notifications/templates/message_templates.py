# -*- coding: utf-8 -*-\n"""Telegram message templates per notification type (Indonesian, Markdown)."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

from telegram.helpers import escape_markdown

from restaurant_notifications.exceptions import UnknownNotificationTypeError

DEFAULT_TIMEZONE = "Asia/Makassar"

Data = Mapping[str, Any]


def format_idr(amount: Any) -> str:
    """Format an amount as Indonesian Rupiah, e.g. 150000 -> 'Rp 150.000'."""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return "N/A"
    return "Rp " + f"{value:,.0f}".replace(",", ".")


def _text(data: Data, key: str, default: str = "N/A") -> str:
    value = data.get(key)
    if value is None or value == "":
        return default
    return escape_markdown(str(value))


def _amount(data: Data, key: str) -> str:
    value = data.get(key)
    return format_idr(value) if value else "N/A"


def _optional_line(data: Data, key: str, label: str) -> str:
    value = data.get(key)
    return f"{label}: {escape_markdown(str(value))}" if value else ""


def _now(tz_name: str) -> datetime:
    return datetime.now(ZoneInfo(tz_name))


def render_test_message(now: Optional[datetime] = None, tz_name: str = DEFAULT_TIMEZONE) -> str:
    """Canned message used to verify a chat receives bot notifications."""
    moment = now or _now(tz_name)
    return (
        "🤖 *Test Message*\n\n"
        "Ini adalah pesan test dari Cafe Management System.\n\n"
        "✅ Bot berfungsi dengan baik!\n"
        f"⏰ {moment.strftime('%d/%m/%Y %H:%M')}\n\n"
        "📱 Jika Anda menerima pesan ini, berarti notifikasi Telegram sudah aktif."
    )


# -----------------------------------------------------------------------------
# Orders
# -----------------------------------------------------------------------------


def _order_received(d: Data) -> str:
    return (
        "🔔 *PESANAN BARU*\n\n"
        f"📋 Order: *{_text(d, 'order_number')}*\n"
        f"👤 Customer: {_text(d, 'customer_name')}\n"
        f"🪑 Meja: {_text(d, 'table_number', 'Takeaway')}\n"
        f"💰 Total: {_amount(d, 'total_amount')}\n"
        f"📦 Items: {d.get('items_count') or 0} item\n\n"
        "⏳ Menunggu pembayaran dan verifikasi kasir"
    )


def _payment_received(d: Data) -> str:
    return (
        "💳 *PEMBAYARAN DITERIMA*\n\n"
        f"📋 Order: *{_text(d, 'order_number')}*\n"
        f"👤 Customer: {_text(d, 'customer_name')}\n"
        f"💰 Jumlah: {_amount(d, 'total_amount')}\n"
        f"💳 Metode: {_text(d, 'payment_method')}\n\n"
        "⚠️ *Perlu verifikasi kasir*\n"
        "Silakan cek bukti pembayaran di tablet kasir"
    )


def _payment_verified(d: Data) -> str:
    return (
        "✅ *PEMBAYARAN TERVERIFIKASI*\n\n"
        f"📋 Order: *{_text(d, 'order_number')}*\n"
        f"👤 Customer: {_text(d, 'customer_name')}\n"
        f"🪑 Meja: {_text(d, 'table_number', 'Takeaway')}\n\n"
        "🍳 Order diteruskan ke dapur\n"
        f"⏱️ Estimasi: {d.get('estimated_time') or 15} menit"
    )


def _payment_rejected(d: Data) -> str:
    return (
        "❌ *PEMBAYARAN DITOLAK*\n\n"
        f"📋 Order: *{_text(d, 'order_number')}*\n"
        f"👤 Customer: {_text(d, 'customer_name')}\n\n"
        "⚠️ Bukti pembayaran tidak valid\n"
        "Customer perlu melakukan pembayaran ulang"
    )


def _order_preparing(d: Data) -> str:
    return (
        "🍳 *ORDER SEDANG DIPROSES*\n\n"
        f"📋 Order: *{_text(d, 'order_number')}*\n"
        f"👤 Customer: {_text(d, 'customer_name')}\n"
        f"🪑 Meja: {_text(d, 'table_number', 'Takeaway')}\n\n"
        "👨‍🍳 Dapur sedang memproses pesanan\n"
        f"⏱️ Estimasi selesai: {d.get('estimated_time') or 15} menit"
    )


def _order_ready(d: Data) -> str:
    return (
        "🔔 *ORDER SIAP!*\n\n"
        f"📋 Order: *{_text(d, 'order_number')}*\n"
        f"👤 Customer: {_text(d, 'customer_name')}\n"
        f"🪑 Meja: {_text(d, 'table_number', 'Takeaway')}\n\n"
        "✅ Pesanan siap diantar\n"
        "🚶‍♂️ Pelayan segera kirim ke meja"
    )


def _order_completed(d: Data) -> str:
    return (
        "🎉 *ORDER SELESAI*\n\n"
        f"📋 Order: *{_text(d, 'order_number')}*\n"
        f"👤 Customer: {_text(d, 'customer_name')}\n"
        f"💰 Total: {_amount(d, 'total_amount')}\n\n"
        "✅ Pesanan telah disajikan dan diselesaikan\n"
        f"🪑 Meja {_text(d, 'table_number')} tersedia kembali"
    )


def _order_cancelled(d: Data) -> str:
    return (
        "🚫 *ORDER DIBATALKAN*\n\n"
        f"📋 Order: *{_text(d, 'order_number')}*\n"
        f"👤 Customer: {_text(d, 'customer_name')}\n"
        f"🪑 Meja: {_text(d, 'table_number', 'Takeaway')}\n\n"
        "⚠️ Pesanan telah dibatalkan\n"
        "💸 Refund diproses jika pembayaran sudah dilakukan"
    )


# -----------------------------------------------------------------------------
# Stock
# -----------------------------------------------------------------------------


def _stock_low(d: Data) -> str:
    unit = _text(d, "unit", "")
    return (
        "⚠️ *STOK MENIPIS*\n\n"
        f"📦 Bahan: *{_text(d, 'ingredient_name')}*\n"
        f"📊 Stok saat ini: {d.get('current_stock', 0)} {unit}\n"
        f"🔴 Minimum: {d.get('minimum_stock', 0)} {unit}\n\n"
        "🛒 Segera lakukan pemesanan ulang\n"
        f"{_optional_line(d, 'supplier', '📞 Supplier')}"
    ).rstrip()


def _stock_out(d: Data) -> str:
    return (
        "🚨 *STOK HABIS!*\n\n"
        f"📦 Bahan: *{_text(d, 'ingredient_name')}*\n"
        f"📊 Stok: 0 {_text(d, 'unit', '')}\n\n"
        "❌ Menu terkait tidak dapat dipesan\n"
        "🛒 URGENT: Segera isi ulang stok!\n"
        f"{_optional_line(d, 'supplier', '📞 Hubungi')}"
    ).rstrip()


# -----------------------------------------------------------------------------
# Employees: attendance, overtime, leave, shifts, payroll
# -----------------------------------------------------------------------------


def _employee_clockin(d: Data) -> str:
    return (
        "🕐 *MASUK KERJA*\n\n"
        f"👤 {_text(d, 'employee_name')}\n"
        f"💼 {_text(d, 'position', 'Staff')}\n"
        f"⏰ Clock In: {_text(d, 'shift_time', 'Sekarang')}\n\n"
        "✅ Absensi berhasil dicatat\n"
        "🎯 Semangat bekerja hari ini!"
    )


def _employee_clockout(d: Data) -> str:
    return (
        "🕐 *PULANG KERJA*\n\n"
        f"👤 {_text(d, 'employee_name')}\n"
        f"💼 {_text(d, 'position', 'Staff')}\n"
        f"⏰ Clock Out: {_text(d, 'shift_time', 'Sekarang')}\n\n"
        "✅ Shift hari ini selesai\n"
        "👏 Terima kasih atas kerja kerasnya!"
    )


def _overtime_request(d: Data) -> str:
    return (
        "⏰ *PENGAJUAN LEMBUR*\n\n"
        f"👤 {_text(d, 'employee_name')}\n"
        f"💼 {_text(d, 'position', 'Staff')}\n"
        f"🕐 Durasi: {d.get('overtime_hours') or 0} jam\n\n"
        "⚠️ Perlu persetujuan owner\n"
        "📱 Cek dashboard untuk approve/reject"
    )


def _overtime_approved(d: Data) -> str:
    return (
        "✅ *LEMBUR DISETUJUI*\n\n"
        f"👤 {_text(d, 'employee_name')}\n"
        f"🕐 Durasi: {d.get('overtime_hours') or 0} jam\n"
        f"💰 Bayaran: {_amount(d, 'total_pay')}\n\n"
        "✅ Lembur telah disetujui\n"
        "💳 Akan dibayar di slip gaji bulan ini"
    )


def _overtime_rejected(d: Data) -> str:
    return (
        "❌ *LEMBUR DITOLAK*\n\n"
        f"👤 {_text(d, 'employee_name')}\n"
        f"🕐 Durasi: {d.get('overtime_hours') or 0} jam\n\n"
        "❌ Pengajuan lembur tidak disetujui\n"
        "📱 Hubungi owner untuk penjelasan"
    )


def _leave_approved(d: Data) -> str:
    return (
        "✅ *CUTI DISETUJUI*\n\n"
        f"👤 {_text(d, 'employee_name')}\n"
        f"📅 Tanggal: {_text(d, 'start_date')} - {_text(d, 'end_date')}\n"
        f"📝 Jenis: {_text(d, 'leave_type', 'Cuti')}\n\n"
        "🌴 Selamat beristirahat!"
    )


def _leave_rejected(d: Data) -> str:
    return (
        "❌ *CUTI DITOLAK*\n\n"
        f"👤 {_text(d, 'employee_name')}\n"
        f"📅 Tanggal: {_text(d, 'start_date')} - {_text(d, 'end_date')}\n"
        f"{_optional_line(d, 'reason', '📝 Alasan')}\n\n"
        "📱 Hubungi owner untuk penjelasan"
    )


def _shift_published(d: Data) -> str:
    return (
        "📅 *JADWAL SHIFT BARU*\n\n"
        f"Halo {_text(d, 'employee_name')}! 👋\n\n"
        f"🗓️ Periode: {_text(d, 'period')}\n"
        f"🕐 Shift: {_text(d, 'shift_time')}\n\n"
        "📱 Cek jadwal lengkap di portal karyawan"
    )


def _shift_reminder(d: Data) -> str:
    return (
        "⏰ *PENGINGAT SHIFT*\n\n"
        f"Halo {_text(d, 'employee_name')}! 👋\n\n"
        f"🕐 Shift Anda dimulai pukul {_text(d, 'shift_time')}\n"
        "📍 Jangan lupa absen saat tiba\n"
        "📱 Gunakan aplikasi untuk clock in\n\n"
        "⏰ Datang 10 menit lebih awal ya!"
    )


def _payslip_ready(d: Data) -> str:
    return (
        "💰 *SLIP GAJI TERSEDIA*\n\n"
        f"Halo {_text(d, 'employee_name')}! 👋\n\n"
        "📊 Slip gaji bulan ini sudah siap\n"
        f"💳 Total: {_amount(d, 'total_pay')}\n\n"
        "📱 Login ke portal karyawan untuk melihat detail\n"
        "🔍 Cek rincian gaji, lembur, dan potongan"
    )


def _birthday_reminder(d: Data) -> str:
    return (
        "🎂 *SELAMAT ULANG TAHUN!*\n\n"
        f"Selamat ulang tahun {_text(d, 'employee_name')}! 🎉\n\n"
        "🎈 Semoga panjang umur dan sehat selalu\n"
        "🍰 Rezeki semakin lancar\n"
        "🎁 Karir semakin cemerlang\n\n"
        "Terima kasih sudah menjadi bagian tim kami! 👏"
    )


# -----------------------------------------------------------------------------
# Reports and system
# -----------------------------------------------------------------------------


def _report_figures(d: Data) -> str:
    return (
        f"📅 {_text(d, 'period')}\n\n"
        f"💰 Total Pendapatan: {format_idr(d.get('total_revenue') or 0)}\n"
        f"📦 Total Order: {d.get('total_orders') or 0}\n"
        f"🏆 Best Seller: {_text(d, 'best_selling_item')}\n"
        f"📈 Profit Margin: {d.get('profit_margin') or 0}%\n\n"
    )


def _daily_report(d: Data) -> str:
    try:
        productive = float(d.get("total_revenue") or 0) > 0
    except (TypeError, ValueError):
        productive = False
    closing = "🎉 Hari yang produktif!" if productive else "📈 Mari semangat besok!"
    return f"📊 *LAPORAN HARIAN*\n\n{_report_figures(d)}{closing}"


def _monthly_report(d: Data) -> str:
    return (
        f"📊 *LAPORAN BULANAN*\n\n{_report_figures(d)}"
        "📈 Evaluasi kinerja dan strategi bulan depan"
    )


def _system_alert(d: Data) -> str:
    return (
        "🚨 *SISTEM ALERT*\n\n"
        f"⚠️ {_text(d, 'alert_type', 'System Alert')}\n\n"
        f"📝 Detail: {_text(d, 'message', 'Tidak ada detail')}\n"
        f"🔧 Status: {_text(d, 'status', 'Unknown')}\n"
        f"{_optional_line(d, 'action_required', '📋 Tindakan')}\n\n"
        "🛠️ Segera cek sistem untuk detail lebih lanjut"
    )


def _maintenance_alert(d: Data) -> str:
    return (
        "🔧 *MAINTENANCE ALERT*\n\n"
        f"⚙️ Jenis: {_text(d, 'maintenance_type', 'General Maintenance')}\n"
        f"⏰ Jadwal: {_text(d, 'scheduled_time', 'TBD')}\n"
        f"⏱️ Durasi: {_text(d, 'estimated_duration', 'Unknown')}\n"
        f"{_optional_line(d, 'affected_services', '📋 Yang terpengaruh')}\n\n"
        "💡 Siapkan alternatif jika diperlukan"
    )


_TEMPLATES: dict[str, Callable[[Data], str]] = {
    "order_received": _order_received,
    "payment_received": _payment_received,
    "payment_verified": _payment_verified,
    "payment_rejected": _payment_rejected,
    "order_preparing": _order_preparing,
    "order_ready": _order_ready,
    "order_completed": _order_completed,
    "order_cancelled": _order_cancelled,
    "stock_low": _stock_low,
    "stock_out": _stock_out,
    "employee_clockin": _employee_clockin,
    "employee_clockout": _employee_clockout,
    "overtime_request": _overtime_request,
    "overtime_approved": _overtime_approved,
    "overtime_rejected": _overtime_rejected,
    "leave_approved": _leave_approved,
    "leave_rejected": _leave_rejected,
    "shift_published": _shift_published,
    "shift_reminder": _shift_reminder,
    "payslip_ready": _payslip_ready,
    "birthday_reminder": _birthday_reminder,
    "daily_report": _daily_report,
    "monthly_report": _monthly_report,
    "system_alert": _system_alert,
    "maintenance_alert": _maintenance_alert,
}

NOTIFICATION_TYPES = frozenset(_TEMPLATES)


class MessageTemplateRenderer:
    """Render a notification type plus its data into Markdown text with a timestamp footer."""

    def __init__(
        self,
        cafe_name: str = "Cafe Management System",
        *,
        tz_name: str = DEFAULT_TIMEZONE,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._cafe_name = cafe_name
        self._tz_name = tz_name
        self._clock = clock or (lambda: _now(tz_name))

    def supports(self, notification_type: str) -> bool:
        return notification_type in _TEMPLATES

    def render(self, notification_type: str, data: Optional[Data] = None) -> str:
        """Return the message for notification_type.

        Raises:
            UnknownNotificationTypeError: If no template exists for the type.
        """
        template = _TEMPLATES.get(notification_type)
        if template is None:
            raise UnknownNotificationTypeError(notification_type)
        data = data or {}
        body = template(data)
        timestamp = data.get("timestamp") or self._clock().strftime("%d/%m/%Y %H:%M")
        cafe_name = data.get("cafe_name") or self._cafe_name
        return f"{body}\n\n⏰ {timestamp}\n📍 {cafe_name}"
