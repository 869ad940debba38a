"""Wizard CSS — dark terminal palette with green accents."""

from __future__ import annotations

WIZARD_CSS = """

Screen {
    background: #0A0A0A;
    layout: vertical;
}

#header-bar {
    dock: top;
    height: 3;
    background: #0F0F0F;
    padding: 1 2;
    border-bottom: heavy #0D3B0D;
}

#header-title {
    width: 1fr;
    color: #00FF41;
    text-style: bold;
}

#header-subtitle {
    width: auto;
    color: #007018;
    text-style: italic;
}

#body {
    height: 1fr;
}

#sidebar {
    width: 28;
    border-right: heavy #0D3B0D;
    padding: 1 0;
}

.sidebar-item {
    color: #3A5F3A;
    height: 1;
}

.sidebar-item.--current {
    color: #00FF41;
    text-style: bold;
}

.sidebar-item.--completed {
    color: #00CC33;
}

.sidebar-item.--locked {
    color: #2A3A2A;
}

#main {
    width: 1fr;
    padding: 0 2;
}

#top-step {
    height: 1;
    color: #007018;
    margin: 1 0;
}

#step-container {
    height: 1fr;
    overflow-y: auto;
}

#step-container:disabled {
    opacity: 60%;
}

.step-title {
    color: #00FF41;
    text-style: bold;
    padding: 0 0 1 0;
}

.step-subtitle {
    color: #B0B0B0;
    padding: 0 0 1 0;
}

.step-hint {
    padding: 0 0 1 0;
}

.field-row {
    height: 3;
    align: left middle;
}

.field-label {
    width: 12;
    color: #B0B0B0;
}

.field-row Input, .field-row Select {
    width: 60;
}

.field-error {
    height: auto;
    padding: 0 0 0 12;
    display: none;
}

#mode-radio, #wallet-input-mode {
    height: auto;
    margin: 0 0 1 0;
}

#phrase-input {
    height: 6;
}

#phrase-actions {
    height: 3;
    align: left middle;
}

#word-count {
    padding: 0 2;
}

#word-preview {
    height: auto;
    padding: 1 0;
    color: #B0B0B0;
}

.wallet-card {
    border: heavy #0D3B0D;
    padding: 1 2;
    height: auto;
}

#strength-bar {
    width: 24;
}

#match-indicator {
    padding: 0 0 0 2;
}

#pwd-feedback {
    padding: 0 0 0 12;
    height: auto;
}

#nav-bar {
    dock: bottom;
    height: 3;
    align: right middle;
    padding: 0 2;
}

#nav-bar Button {
    margin: 0 0 0 1;
}

#btn-next {
    background: #0D3B0D;
    color: #00FF41;
    text-style: bold;
}

#btn-next:disabled, #btn-back:disabled {
    opacity: 40%;
}

#done-message {
    color: #00FF41;
    padding: 2 0;
}
"""
