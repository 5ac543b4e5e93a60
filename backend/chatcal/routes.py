"""API 路由"""
from io import BytesIO

from flask import Blueprint, jsonify, request, send_file
from werkzeug.exceptions import HTTPException

from chatcal import aggregate
from chatcal.ingest import RawDocument
from chatcal.platforms import PLATFORMS, is_platform, platform_keys
from chatcal.store import store

api = Blueprint('api', __name__)


def _parse_flag(raw, default: bool = False) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in {'1', 'true', 'yes', 'on'}


def _arg_flag(name: str, default: bool = False) -> bool:
    return _parse_flag(request.args.get(name), default)


def _selected_platforms():
    """`platforms=a,b` selects a subset; absent means all, empty means none."""
    raw = request.args.get('platforms')
    if raw is None:
        return platform_keys()
    return [p.strip() for p in raw.split(',') if is_platform(p.strip())]


def _filtered():
    return aggregate.filter_records(
        store.snapshot(),
        term=request.args.get('q', ''),
        platforms=_selected_platforms(),
        cross_platform=_arg_flag('cross'),
    )


@api.route('/platforms', methods=['GET'])
def get_platforms():
    """
    获取平台列表及各平台对话数量（不受筛选影响）

    Returns:
        {'platforms': {...}, 'counts': {'chatgpt': 3, ...}}
    """
    try:
        return jsonify({
            'platforms': PLATFORMS,
            'counts': aggregate.platform_counts(store.snapshot()),
        })
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@api.route('/conversations', methods=['GET'])
def get_conversations():
    """
    获取筛选后的对话列表

    Query:
        q: 搜索词（标题/内容/标签）
        platforms: 逗号分隔的平台列表
        cross: 1 表示跨平台模式（显示全部记录）
    """
    try:
        records = _filtered()
        return jsonify({
            'conversations': [r.to_dict() for r in records],
            'total': len(records),
        })
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@api.route('/conversations/<record_id>', methods=['GET'])
def get_conversation(record_id):
    try:
        record = store.get(record_id)
        if record is None:
            return jsonify({'error': f'Conversation not found: {record_id}'}), 404
        return jsonify(record.to_dict())
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@api.route('/conversations/<record_id>/star', methods=['POST'])
def toggle_star(record_id):
    """切换星标"""
    try:
        record = store.toggle_star(record_id)
        if record is None:
            return jsonify({'error': f'Conversation not found: {record_id}'}), 404
        return jsonify({'success': True, 'conversation': record.to_dict()})
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@api.route('/calendar', methods=['GET'])
def get_calendar():
    """
    按日期分组的对话（日历视图）

    Query:
        与 /conversations 相同的筛选参数
        year, month: 可选，同时返回该月的日历格子
    """
    try:
        buckets = aggregate.group_by_day(_filtered())
        payload = {
            'days': {day: [r.to_dict() for r in records] for day, records in buckets.items()},
        }

        year = request.args.get('year', type=int)
        month = request.args.get('month', type=int)
        if year is not None and month is not None:
            if not 1 <= month <= 12:
                return jsonify({'error': 'month must be between 1 and 12'}), 400
            grid = aggregate.month_grid(year, month)
            payload['grid'] = [d.isoformat() if d else None for d in grid]

        return jsonify(payload)
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@api.route('/analytics', methods=['GET'])
def get_analytics():
    try:
        return jsonify(aggregate.compute_analytics(_filtered()).to_dict())
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@api.route('/import', methods=['POST'])
def import_exports():
    """
    导入 ChatGPT / DeepSeek 导出的 JSON 文件（multipart 字段名 files）

    Returns:
        {'outcomes': [...], 'totalImported': n, 'message': '...'}
    """
    try:
        files = request.files.getlist('files')
        if not files:
            return jsonify({'error': 'no files uploaded'}), 400

        documents = (RawDocument(f.filename or 'upload.json', f.stream) for f in files)
        result = store.ingest(documents)
        data = result.to_dict()
        data['success'] = not result.failed
        return jsonify(data)
    except HTTPException:
        raise
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@api.route('/export', methods=['GET'])
def export_conversations():
    """下载当前筛选结果（JSON）"""
    try:
        fmt = (request.args.get('format') or 'json').strip() or 'json'
        raw = aggregate.export_records(_filtered()).encode('utf-8')
        return send_file(
            BytesIO(raw),
            mimetype='application/json',
            as_attachment=True,
            download_name=aggregate.export_filename(fmt),
        )
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@api.route('/reset', methods=['POST'])
def reset_conversations():
    """重置为示例数据"""
    try:
        payload = request.get_json(silent=True) or {}
        count = store.reset(seed_samples=_parse_flag(payload.get('samples'), True), seed=payload.get('seed'))
        return jsonify({'success': True, 'total': count})
    except Exception as e:
        return jsonify({'error': str(e)}), 500
