"""
Dynamic Module System - コントロールパネル シグナルディスパッチャ

## アーキテクチャ概要

レイヤー構造 (依存関係は下位→上位のみ):

┌─────────────────────────────────────────────────────┐
│ api/                                                │  最上位層
│  ├── main.py - FastAPI アプリケーション             │
│  ├── routes/ - panels / system エンドポイント       │
│  └── services/module_service.py - 一元管理         │
├─────────────────────────────────────────────────────┤
│ backend/                                            │  中間層
│  ├── panel/ - Panel / Module / Dispatcher / Parser  │
│  ├── state/ - StateStore (型付きステート)          │
│  ├── transport/ - Serial (pyserial) / Mock          │
│  └── logging/ - アプリケーションロガー             │
├─────────────────────────────────────────────────────┤
│ config/                                             │  設定層
│  ├── settings.py - 環境変数管理 (Pydantic Settings)│
│  └── modules_config.py - モジュール構成の読み込み  │
├─────────────────────────────────────────────────────┤
│ schemas/                                            │  最下位層
│  ├── oid.py - シグナル識別子 (Oid)                 │
│  ├── state_value.py - 型タグ付きの値               │
│  ├── message.py - ParsedMessage                    │
│  ├── outcome.py - DispatchOutcome                  │
│  ├── registry.py - PanelDescriptor / Lifecycle     │
│  └── modules_config.py - ModulesConfig             │
└─────────────────────────────────────────────────────┘

## データフロー

受信行 → Parser (分割・型変換) → シグナル解決 → StateStore更新
       → JSONペイロード → Transport.write()

## 依存ルール

1. **上位層 → 下位層**: 許可 (api → backend → config → schemas)
2. **下位層 → 上位層**: 禁止 (循環参照防止)
3. **schemas/**: 外部ライブラリ (pydantic) のみに依存
4. **同一層内**: 相互依存は最小限に (必要なら分割を検討)

## 使用例

```python
from backend.panel import Module, Panel
from schemas import Oid

module = Module("Pedestal")
panel = Panel("Pedestal.Trim", ["OverheadBrightForOledStep"], "COM3")
module.add_panel(panel)
panel.on_data_received(panel.name, "OverheadBrightForOledStep I 100")
panel.state_store.get_int(Oid.OverheadBrightForOledStep)  # 100
```
"""

__version__ = "0.1.0"
